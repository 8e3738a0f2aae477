"""Import worker: apply a meta property file to the reference target store."""
