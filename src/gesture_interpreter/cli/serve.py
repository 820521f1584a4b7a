"""Server streaming the gesture state to a browser (or any other consumer)."""

import asyncio
import json
import logging
import threading
from collections.abc import Callable, Iterator
from pathlib import Path

import typer
from aiohttp import web  # type: ignore[import-not-found]
from aiohttp_sse import sse_response  # type: ignore[import-not-found]

from ..config import Config
from ..interpreter import GestureInterpreter
from ..models.state import GestureState
from .common import (
    DEFAULT_USER_CONFIG_PATH,
    app,
    determine_gpu_usage,
    determine_mirror_mode,
    get_model_path,
    init_camera_capture,
)

logger = logging.getLogger("gesture_interpreter.server")
logger.setLevel(logging.INFO)

# Configure handler if logger doesn't have one
if not logger.handlers:
    handler = logging.StreamHandler()
    formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    handler.setFormatter(formatter)
    handler.setLevel(logging.INFO)
    logger.addHandler(handler)
    logger.propagate = False  # Don't propagate to root logger

StatesProvider = Callable[[GestureInterpreter], Iterator[GestureState]]

INTERPRETER_KEY = web.AppKey("interpreter", GestureInterpreter)


class StateBroadcaster:
    """Dispatch each new state to all the connected clients.

    Each client has a small queue. When a client is too slow, its oldest states are dropped.
    """

    def __init__(self, max_queue_size: int = 5) -> None:
        self.max_queue_size = max_queue_size
        self.subscribers: set[asyncio.Queue[GestureState]] = set()

    def subscribe(self) -> asyncio.Queue[GestureState]:
        queue: asyncio.Queue[GestureState] = asyncio.Queue(maxsize=self.max_queue_size)
        self.subscribers.add(queue)
        return queue

    def unsubscribe(self, queue: asyncio.Queue[GestureState]) -> None:
        self.subscribers.discard(queue)

    def publish(self, state: GestureState) -> None:
        """Must be called from the event loop thread."""
        for queue in self.subscribers:
            if queue.full():
                queue.get_nowait()
            queue.put_nowait(state)


BROADCASTER_KEY = web.AppKey("broadcaster", StateBroadcaster)


class FramesWorker:
    """Run the recognition in a thread and publish the states on the event loop."""

    def __init__(self, interpreter: GestureInterpreter, states_provider: StatesProvider) -> None:
        self.interpreter = interpreter
        self.states_provider = states_provider
        self.thread: threading.Thread | None = None
        self.stop_processing = False

    def process_frames(self, loop: asyncio.AbstractEventLoop, broadcaster: StateBroadcaster) -> None:
        try:
            for state in self.states_provider(self.interpreter):
                if self.stop_processing:
                    break
                loop.call_soon_threadsafe(broadcaster.publish, state)
        except Exception as e:
            logger.exception(f"Error in frame processing thread: {e}")
        finally:
            self.stop_processing = True

    def start(self, loop: asyncio.AbstractEventLoop, broadcaster: StateBroadcaster) -> None:
        if self.thread is None or not self.thread.is_alive():
            self.stop_processing = False
            self.thread = threading.Thread(target=self.process_frames, args=(loop, broadcaster), daemon=True)
            self.thread.start()

    def stop(self) -> None:
        self.stop_processing = True
        if self.thread and self.thread.is_alive():
            self.thread.join(timeout=1)


def state_payload(state: GestureState) -> str:
    return json.dumps(state.to_dict())


async def healthz(request: web.Request) -> web.Response:
    """Health check endpoint."""
    return web.Response(text="OK", status=200)


async def get_state(request: web.Request) -> web.Response:
    """Latest gesture state, for clients polling instead of listening to SSE."""
    return web.json_response(request.app[INTERPRETER_KEY].state.to_dict())


async def get_calibration(request: web.Request) -> web.Response:
    threshold = request.app[INTERPRETER_KEY].calibration
    return web.json_response({"threshold": threshold, "isCustomThreshold": threshold is not None})


async def calibrate(request: web.Request) -> web.Response:
    """Use the current pinch distance as reference for the pinch threshold."""
    threshold = request.app[INTERPRETER_KEY].calibrate()
    if threshold is None:
        return web.json_response({"error": "No pinch distance known, show your hand first"}, status=409)
    logger.info(f"Pinch threshold calibrated to {threshold:.4f}")
    return web.json_response({"threshold": threshold, "isCustomThreshold": True})


async def reset_calibration(request: web.Request) -> web.Response:
    request.app[INTERPRETER_KEY].reset_calibration()
    logger.info("Pinch calibration reset")
    return web.json_response({"threshold": None, "isCustomThreshold": False})


async def sse_handler(request: web.Request) -> web.StreamResponse:
    """Send a `state` event for each interpreted frame."""
    broadcaster = request.app[BROADCASTER_KEY]
    queue = broadcaster.subscribe()

    async with sse_response(request) as resp:
        try:
            await resp.send(state_payload(request.app[INTERPRETER_KEY].state), event="state")
            while resp.is_connected():
                state = await queue.get()
                await resp.send(state_payload(state), event="state")
        except ConnectionResetError:
            logger.info("SSE client disconnected")
        finally:
            broadcaster.unsubscribe(queue)

    return resp


def create_app(interpreter: GestureInterpreter, states_provider: StatesProvider | None = None) -> web.Application:
    """Create the aiohttp application. Without `states_provider`, states are only those of `interpreter`."""
    application = web.Application()
    application[INTERPRETER_KEY] = interpreter
    application[BROADCASTER_KEY] = StateBroadcaster()

    application.router.add_get("/healthz", healthz)
    application.router.add_get("/state", get_state)
    application.router.add_get("/sse", sse_handler)
    application.router.add_get("/calibrate", get_calibration)
    application.router.add_post("/calibrate", calibrate)
    application.router.add_delete("/calibrate", reset_calibration)

    if states_provider is not None:
        worker = FramesWorker(interpreter, states_provider)

        async def on_startup(app: web.Application) -> None:
            worker.start(asyncio.get_running_loop(), app[BROADCASTER_KEY])

        async def on_cleanup(app: web.Application) -> None:
            worker.stop()

        application.on_startup.append(on_startup)
        application.on_cleanup.append(on_cleanup)

    return application


def camera_states_provider(
    camera_index: int, config: Config, mirror: bool, use_gpu: bool, desired_size: int
) -> StatesProvider:
    """Build a states provider reading the camera through the MediaPipe recognizer."""

    def provider(interpreter: GestureInterpreter) -> Iterator[GestureState]:
        from ..recognizer import Recognizer

        cap, _ = init_camera_capture(camera_index, False, desired_size)
        if cap is None:
            logger.error(f"Camera {camera_index} unavailable, no gesture state will be streamed")
            return
        try:
            with Recognizer(
                interpreter, get_model_path(), config=config.tracker, use_gpu=use_gpu, mirroring=mirror
            ) as recognizer:
                for _frame, _stream_info, state in recognizer.handle_opencv_capture(cap):
                    yield state
        finally:
            cap.release()

    return provider


def serve(host: str, port: int, interpreter: GestureInterpreter, states_provider: StatesProvider) -> None:
    """Run the server until interrupted."""
    application = create_app(interpreter, states_provider)

    async def start_server() -> None:
        runner = web.AppRunner(application)
        await runner.setup()
        site = web.TCPSite(runner, host, port)
        await site.start()

        logger.info(f"Gesture server running at http://{host}:{port} (SSE at /sse)")

        try:
            await asyncio.Event().wait()
        finally:
            await runner.cleanup()

    try:
        asyncio.run(start_server())
    except KeyboardInterrupt:
        logger.info("Shutting down...")


@app.command(name="serve")
def serve_cmd(
    host: str = typer.Option("127.0.0.1", "--host", help="Host to bind to"),
    port: int = typer.Option(9810, "--port", help="Port to bind to"),
    camera: int | None = typer.Option(None, "--camera", "--cam", help="Index of the camera device"),
    mirror: bool | None = typer.Option(None, "--mirror/--no-mirror", help="Mirror the hands positions"),
    size: int | None = typer.Option(None, "--size", "-s", help="Maximum dimension of the camera capture"),
    gpu: bool | None = typer.Option(None, "--gpu/--no-gpu", help="Use GPU acceleration"),
    config_path: Path | None = typer.Option(  # noqa: B008
        None, "--config", "-c", help=f"Path to config file. Default: {DEFAULT_USER_CONFIG_PATH}"
    ),
) -> None:
    """Stream the gesture state of the camera as Server-Sent Events."""
    config = Config.load(config_path)

    states_provider = camera_states_provider(
        camera if camera is not None else config.cli.camera,
        config=config,
        mirror=determine_mirror_mode(mirror, config),
        use_gpu=determine_gpu_usage(gpu, config),
        desired_size=size if size is not None else config.cli.size,
    )
    serve(host, port, GestureInterpreter(config.interpreter), states_provider)
