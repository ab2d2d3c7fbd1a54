"Web layer: FastAPI routers, HTML components and request-scoped wiring"
