"""Route wiring for resource controllers.

Routes are relative to the prefix the router is mounted under, which must
be non-empty. ``/count`` is registered before ``/{id}`` so it is not
captured as an id.
"""

from fastapi import APIRouter

from resource_api.api.controller import ModelController, create_controller


def build_router(controller: ModelController) -> APIRouter:
    router = APIRouter()
    name = controller.model_name

    router.add_api_route("", controller.list, methods=["GET"], summary=f"List {name}")
    router.add_api_route("/count", controller.count, methods=["GET"], summary=f"Count {name}")
    router.add_api_route("", controller.create, methods=["POST"], status_code=201, summary=f"Create {name}")
    router.add_api_route("", controller.remove, methods=["DELETE"], status_code=204, summary=f"Remove {name} matching a filter")
    router.add_api_route("/{id}", controller.get, methods=["GET"], summary=f"Get one {name} record")
    router.add_api_route("/{id}", controller.update, methods=["PUT", "PATCH"], status_code=201, summary=f"Update one {name} record")
    router.add_api_route("/{id}", controller.delete_by_id, methods=["DELETE"], status_code=204, summary=f"Delete one {name} record")
    return router


def create_resource_router(model_name: str) -> APIRouter:
    return build_router(create_controller(model_name))
