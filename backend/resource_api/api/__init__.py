"""HTTP layer: resource controllers, routing, and error mapping."""
