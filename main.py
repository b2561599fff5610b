"""
Main API module for the Blog API.

Responsibilities:
    - Expose REST endpoints for registering users and for blog post CRUD
    - Gate post writes (create, update, delete) behind HTTP Basic auth
    - Map domain and storage failures to the API's JSON error bodies
    - Start and stop a server explicitly through `run_server` / `close_server`

Architecture:
    - App Factory pattern (create_app) for test isolation and DI.
    - In-memory stores by default; MongoDB or PostgreSQL through the storage factory.
    - BlogManager holds the business rules; routes only translate HTTP in and out.

LLM Prompt Example:
    "Explain how to structure a FastAPI service with an application factory,
    injected stores, and HTTP Basic auth applied only to write routes."
"""

import json
import logging
import threading
import time
from dataclasses import dataclass
from typing import Optional

import uvicorn
from fastapi import Depends, FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from auth.dependencies import make_current_identity
from auth.schemas import Identity
from blog_platform.config import settings
from blog_platform.errors import InvalidRequestError, PostNotFoundError, UsernameTakenError
from blog_platform.manager.blog_manager import BlogManager
from blog_platform.schemas import PostCreateRequest, PostUpdateRequest, UserRequest
from blog_platform.storage.base import StorageError, Stores
from blog_platform.storage.storage_factory import get_storage

log = logging.getLogger("blog")
access_log = logging.getLogger("blog.access")


async def read_json_body(request: Request):
    """Decode the request body; an empty body reads as an empty object."""
    raw = await request.body()
    if not raw:
        return {}
    try:
        return json.loads(raw)
    except ValueError:
        raise InvalidRequestError("Invalid request body")


def parse_body(model, data):
    try:
        return model.model_validate(data)
    except ValidationError:
        raise InvalidRequestError("Invalid request body")


def create_app(stores: Optional[Stores] = None) -> FastAPI:
    """
    Factory function to build and configure a new FastAPI app instance.

    Args:
        stores (Optional[Stores]): User/post stores to serve. When omitted,
            the storage factory picks them from the environment.

    Returns:
        FastAPI: A fully configured application instance. The stores are
                 reachable as `app.state.stores` so the caller can close them.
    """
    app = FastAPI(
        title="Blog API",
        description="Blog posts and users, with HTTP Basic auth on post writes",
        docs_url="/docs",
    )

    # basic console logging (optional)
    if not logging.getLogger().handlers:
        logging.basicConfig(level=logging.INFO)

    # ----------------------------------------------------------------
    # Per-app instances (isolated for tests, swappable for production)
    # ----------------------------------------------------------------
    if stores is None:
        stores = get_storage()
    app.state.stores = stores
    manager = BlogManager(users=stores.users, posts=stores.posts)
    current_identity = make_current_identity(stores.users)

    # Write-route bodies are read only after the credentials resolve.
    async def post_create_body(
        request: Request, identity: Identity = Depends(current_identity)
    ) -> PostCreateRequest:
        return parse_body(PostCreateRequest, await read_json_body(request))

    async def post_update_body(
        request: Request, identity: Identity = Depends(current_identity)
    ) -> PostUpdateRequest:
        return parse_body(PostUpdateRequest, await read_json_body(request))

    log.info("Blog storage backend: %s", stores.backend)

    # ----------------------------------------------------------------
    # Access log and error mapping
    # ----------------------------------------------------------------
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000.0
        client = request.client.host if request.client else "-"
        access_log.info(
            '%s - - "%s %s HTTP/%s" %d %.1fms',
            client,
            request.method,
            request.url.path,
            request.scope.get("http_version", "1.1"),
            response.status_code,
            elapsed_ms,
        )
        return response

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        # Unknown paths and unsupported methods both read as a missing resource.
        if exc.status_code in (404, 405):
            return JSONResponse(status_code=404, content={"message": "Not Found"})
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def invalid_body(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"message": "Invalid request body"})

    @app.exception_handler(InvalidRequestError)
    async def invalid_post_body(request: Request, exc: InvalidRequestError):
        return JSONResponse(status_code=400, content={"error": exc.message})

    @app.exception_handler(StorageError)
    async def storage_failure(request: Request, exc: StorageError):
        log.error("Storage failure on %s %s: %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=500, content={"message": "Internal server error"})

    @app.exception_handler(Exception)
    async def unexpected_failure(request: Request, exc: Exception):
        log.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"message": "Internal server error"})

    # ----------------------------------------------------------------
    # Users
    # ----------------------------------------------------------------
    @app.post("/users", status_code=201)
    def create_user(req: UserRequest):
        """
        Register a new user.

        Returns:
            dict: {username, firstName, lastName}; the digest never leaves the store.

        Errors:
            400 {message} for the first missing field, 422 {message} if the
            username is taken, 500 {message} on storage failure.
        """
        try:
            cmd = req.to_command()
        except InvalidRequestError as exc:
            return JSONResponse(status_code=400, content={"message": exc.message})

        try:
            user = manager.register_user(cmd)
        except UsernameTakenError:
            return JSONResponse(status_code=422, content={"message": "username already taken"})
        except StorageError:
            log.exception("Failed to register user %r", cmd.username)
            return JSONResponse(status_code=500, content={"message": "Internal server error"})
        return user.api_repr()

    # ----------------------------------------------------------------
    # Posts
    # ----------------------------------------------------------------
    @app.get("/posts")
    def list_posts():
        try:
            posts = manager.list_posts()
        except StorageError:
            log.exception("Failed to list posts")
            return JSONResponse(status_code=500, content={"error": "Something went wrong"})
        return [post.api_repr() for post in posts]

    @app.get("/posts/{post_id}")
    def get_post(post_id: str):
        try:
            post = manager.get_post(post_id)
        except PostNotFoundError:
            return JSONResponse(status_code=404, content={"error": "Post not found"})
        except StorageError:
            log.exception("Failed to fetch post %s", post_id)
            return JSONResponse(status_code=500, content={"error": "Something went wrong"})
        return post.api_repr()

    @app.post("/posts", status_code=201)
    def create_post(
        req: PostCreateRequest = Depends(post_create_body),
        identity: Identity = Depends(current_identity),
    ):
        """
        Create a post authored by the authenticated user.

        The author always comes from the credentials, never from the body.
        A missing title or content is rejected with 400 and nothing is stored.
        """
        try:
            cmd = req.to_command()
        except InvalidRequestError as exc:
            return JSONResponse(status_code=400, content={"error": exc.message})

        try:
            post = manager.create_post(cmd, identity)
        except StorageError:
            log.exception("Failed to create post for %r", identity.username)
            return JSONResponse(status_code=500, content={"error": "Something went wrong"})
        return post.api_repr()

    @app.put("/posts/{post_id}", status_code=201)
    def update_post(
        post_id: str,
        req: PostUpdateRequest = Depends(post_update_body),
        identity: Identity = Depends(current_identity),
    ):
        """
        Apply a partial update (title and/or content) to a post.

        The body must repeat the path id; a mismatch is rejected with 400
        and the post is left untouched.
        """
        try:
            cmd = req.to_command(post_id)
        except InvalidRequestError as exc:
            return JSONResponse(status_code=400, content={"error": exc.message})

        try:
            post = manager.update_post(cmd)
        except PostNotFoundError:
            return JSONResponse(status_code=404, content={"error": "Post not found"})
        except StorageError:
            log.exception("Failed to update post %s", post_id)
            return JSONResponse(status_code=500, content={"message": "Something went wrong"})
        return post.api_repr()

    @app.delete("/posts/{post_id}", status_code=204)
    def delete_post(post_id: str, identity: Identity = Depends(current_identity)):
        try:
            manager.delete_post(post_id)
        except StorageError:
            log.exception("Failed to delete post %s", post_id)
            return JSONResponse(status_code=500, content={"error": "Something went wrong"})
        return Response(status_code=204)

    return app


# ----------------------------------------------------------------
# Server lifecycle
# ----------------------------------------------------------------
@dataclass
class ServerHandle:
    """A running server: close it with `close_server(handle)`."""
    server: uvicorn.Server
    thread: threading.Thread
    stores: Stores

    @property
    def port(self) -> int:
        return self.server.servers[0].sockets[0].getsockname()[1]


def run_server(
    database_url: Optional[str] = None,
    port: Optional[int] = None,
    backend: Optional[str] = None,
    host: Optional[str] = None,
    startup_timeout: float = 10.0,
) -> ServerHandle:
    """
    Open the stores, build an app and serve it on a background thread.

    Args:
        database_url (Optional[str]): Overrides DATABASE_URL for driver-backed stores.
        port (Optional[int]): Listen port; 0 picks a free one. Defaults to PORT.
        backend (Optional[str]): Overrides BLOG_STORAGE_BACKEND.
        host (Optional[str]): Bind address. Defaults to HOST.
        startup_timeout (float): Seconds to wait for the socket to be bound.

    Returns:
        ServerHandle: Pass it to `close_server` to stop.

    Raises:
        StorageError: If the database cannot be reached.
        RuntimeError: If the server does not come up in time.
    """
    stores = get_storage(backend, database_url=database_url or settings.DATABASE_URL)
    app = create_app(stores=stores)
    config = uvicorn.Config(
        app,
        host=host or settings.HOST,
        port=settings.PORT if port is None else port,
        log_level="info",
    )
    server = uvicorn.Server(config)
    thread = threading.Thread(target=server.run, name="blog-api-server", daemon=True)
    thread.start()

    deadline = time.monotonic() + startup_timeout
    while not server.started:
        if not thread.is_alive() or time.monotonic() > deadline:
            server.should_exit = True
            thread.join(timeout=startup_timeout)
            stores.close()
            raise RuntimeError(f"Server failed to start on port {config.port}")
        time.sleep(0.05)

    handle = ServerHandle(server=server, thread=thread, stores=stores)
    log.info("Your app is listening on port %s", handle.port)
    return handle


def close_server(handle: ServerHandle, timeout: float = 10.0) -> None:
    """Stop accepting connections, wait for the server thread and close the stores."""
    log.info("Closing server")
    handle.server.should_exit = True
    handle.thread.join(timeout=timeout)
    handle.stores.close()
    if handle.thread.is_alive():
        raise RuntimeError("Server did not shut down in time")


# Stores open only when an app is built: `uvicorn --factory main:create_app`.
if __name__ == "__main__":
    uvicorn.run(create_app(), host=settings.HOST, port=settings.PORT)
