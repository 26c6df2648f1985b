"""The smallest useful server: advertise nothing and say hello."""

from lspeasy import LanguageServer, LanguageServerHandler, serve
from lspeasy.types import MessageType, ServerCapabilities


# Create the handler class, which houses
# all the event handlers.
class MyHandler(LanguageServerHandler):
    async def init(self, server: LanguageServer) -> None:
        await server.log("Server started! :)", MessageType.Info)


def main() -> None:
    # Define our server's capabilities
    capabilities = ServerCapabilities()

    # Start up the server
    serve(capabilities, MyHandler())


if __name__ == "__main__":
    main()
