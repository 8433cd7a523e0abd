"""Install execution: the executor, its event stream and the background worker."""
