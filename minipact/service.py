import logging
import threading
import time

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .exceptions import MockServiceException


logger = logging.getLogger(__name__)

METHODS = ['GET', 'POST', 'PUT', 'PATCH', 'DELETE']

START_TIMEOUT = 10


def create_app(service):
    """A FastAPI app handing every request to ``service``."""
    app = FastAPI(openapi_url=None, docs_url=None, redoc_url=None)

    @app.api_route('/{path:path}', methods=METHODS)
    async def respond(request: Request):
        status, body = service.handle(request.method, request.url.path)
        return JSONResponse(body, status_code=status)

    return app


class MockService:
    """
    Local HTTP server answering with declared interactions.

    The server binds an ephemeral port by default, so several services can
    run side by side. A request matching an interaction's method and path
    gets the declared status and a body generated from the declared shape;
    anything else gets a 500 and is recorded in ``unexpected``.
    """

    def __init__(self, interactions=(), host='127.0.0.1', port=0):
        self.interactions = list(interactions)
        self.host = host
        self.port = port

        self.stopped = True
        self.received = []
        self.unexpected = []

        self._server = None
        self._thread = None
        self._bound_port = None
        self._lock = threading.Lock()
        self._request_event = threading.Event()

    @property
    def base_uri(self):
        if self.stopped:
            raise MockServiceException("MockService is not started.")
        return 'http://{}:{}'.format(self.host, self._bound_port)

    def add_interaction(self, interaction):
        """
        Add a new interaction to the mock service.
        """
        if not self.stopped:
            raise MockServiceException(
                "Cannot add interactions to a started MockService.")
        self.interactions.append(interaction)

    def match(self, method, path):
        for interaction in self.interactions:
            if interaction.method == method and interaction.path == path:
                return interaction
        return None

    def handle(self, method, path):
        """
        Answer one request, returning a (status, body) pair.
        """
        interaction = self.match(method, path)
        with self._lock:
            if interaction is None:
                logger.warning('No interaction found for %s %s', method, path)
                self.unexpected.append((method, path))
                status, body = 500, {
                    'message': 'No interaction found for {} {}'.format(method, path),
                }
            else:
                logger.debug('Serving %r', interaction.description)
                self.received.append(interaction)
                status, body = interaction.status, interaction.body.generate()
        self._request_event.set()
        return status, body

    def wait_for_request(self, timeout=None):
        """
        Block until a request has been received, True if one was.
        """
        return self._request_event.wait(timeout)

    def start(self):
        """
        Serve the interactions with uvicorn from a background thread.
        """
        if not self.stopped:
            raise MockServiceException(
                "Cannot start already started MockService.")

        self.received = []
        self.unexpected = []
        self._request_event.clear()

        config = uvicorn.Config(
            create_app(self), host=self.host, port=self.port, loop='asyncio',
            lifespan='off', log_config=None, access_log=False)
        server = uvicorn.Server(config)
        thread = threading.Thread(target=server.run, name='minipact-mock', daemon=True)
        thread.start()

        started = time.time()
        while not server.started:
            if not thread.is_alive():
                raise MockServiceException(
                    'MockService failed to bind {}:{}'.format(self.host, self.port))
            if time.time() - started > START_TIMEOUT:
                server.should_exit = True
                thread.join()
                raise MockServiceException(
                    'MockService failed to start within {}s'.format(START_TIMEOUT))
            time.sleep(0.01)

        self._bound_port = server.servers[0].sockets[0].getsockname()[1]
        self._server = server
        self._thread = thread
        self.stopped = False
        logger.debug('MockService listening on %s', self.base_uri)

    def end(self):
        """
        Stop serving and release the port.
        """
        if self.stopped:
            raise MockServiceException(
                "Cannot end already ended MockService.")

        uri = self.base_uri
        self._server.should_exit = True
        self._thread.join()
        self._server = None
        self._thread = None
        self._bound_port = None
        self.stopped = True
        logger.debug('MockService on %s stopped', uri)

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, type, value, traceback):
        self.end()
