"""HTTP interface: routers, dependencies, middleware and error mapping."""
