from daphne.cli import CommandLineInterface
from django.conf import settings
from django.core.management.base import BaseCommand


class Command(BaseCommand):
    help = "Serve HTTP and websocket traffic with Daphne on HOST:PORT."

    def add_arguments(self, parser):
        parser.add_argument("--host", default=settings.HOST)
        parser.add_argument("--port", type=int, default=settings.PORT)

    def handle(self, *args, **opts):
        self.stdout.write(f"SmartHealthcare listening on {opts['host']}:{opts['port']}")
        CommandLineInterface().run([
            "-b", opts["host"],
            "-p", str(opts["port"]),
            settings.ASGI_APPLICATION.replace(".application", ":application"),
        ])
