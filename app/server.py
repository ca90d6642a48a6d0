"""FastAPI scrape endpoint for the Prometheus exporter"""
import socket
import time
import uvicorn
from fastapi import FastAPI, Response
from fastapi.responses import HTMLResponse
from prometheus_client import CollectorRegistry, CONTENT_TYPE_LATEST, generate_latest
from config import Config
from errors import ListenerBindError
from logging_config import get_logger


logger = get_logger(__name__)


class MetricsServer:
    """Serves one registry on the configured path"""

    def __init__(self, config: Config, registry: CollectorRegistry):
        self.config = config
        self.registry = registry
        self.start_time = time.time()
        self.scrape_count = 0
        self.app = FastAPI(
            title="Dell Hardware Exporter",
            version=config.service_version,
            docs_url=None,  # Disable docs for security
            redoc_url=None,  # Disable redoc for security
            openapi_url=None  # Disable OpenAPI schema for security
        )
        self._setup_routes()

    def _setup_routes(self):
        """Setup FastAPI routes"""

        @self.app.get(self.config.metrics_path, response_class=Response)
        def get_metrics():
            """Serve the registry in the Prometheus text format"""
            self.scrape_count += 1
            return Response(generate_latest(self.registry), media_type=CONTENT_TYPE_LATEST)

        @self.app.get('/health')
        def health_check():
            """Health check endpoint"""
            return {
                "status": "healthy",
                "uptime_seconds": round(time.time() - self.start_time, 1),
                "scrapes": self.scrape_count,
            }

        if self.config.metrics_path != '/':
            @self.app.get('/', response_class=HTMLResponse)
            def index():
                """Landing page"""
                return self._generate_html_interface()

    def _generate_html_interface(self) -> str:
        path = self.config.metrics_path
        return (
            "<html>\n"
            "<head><title>Dell Hardware Exporter</title></head>\n"
            "<body>\n"
            "<h1>Dell Hardware Exporter</h1>\n"
            f"<p><a href=\"{path}\">Metrics</a></p>\n"
            "</body>\n"
            "</html>\n"
        )

    def get_app(self) -> FastAPI:
        """Get FastAPI application"""
        return self.app

    def bind_socket(self) -> socket.socket:
        """Bind the listening socket; failure is fatal"""
        host, port = self.config.metrics_host, self.config.metrics_port
        family = socket.AF_INET6 if ':' in host else socket.AF_INET
        sock = socket.socket(family, socket.SOCK_STREAM)
        try:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            sock.bind((host, port))
        except OSError as e:
            sock.close()
            raise ListenerBindError(f"cannot listen on {host}:{port}: {e}") from e
        sock.set_inheritable(True)
        return sock

    def serve(self) -> None:
        """Block serving scrapes until the process is stopped"""
        sock = self.bind_socket()
        logger.info(
            "Listening for scrapes",
            host=self.config.metrics_host,
            port=self.config.metrics_port,
            path=self.config.metrics_path,
            event_type="server_listen"
        )
        server = uvicorn.Server(uvicorn.Config(self.app, log_config=None))
        server.run(sockets=[sock])
