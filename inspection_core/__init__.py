"""Fleet inspection core: catalog, classifier, analytics and reporting."""
