"""Completion that depends on where the cursor is."""

from lspeasy import CompletionRequest, LanguageServer, LanguageServerHandler, serve
from lspeasy.types import CompletionItem, CompletionOptions, MessageType, ServerCapabilities


class MyHandler(LanguageServerHandler):
    async def init(self, server: LanguageServer) -> None:
        await server.log("Server started! :)", MessageType.Info)

    async def completion(self, server: LanguageServer, req: CompletionRequest) -> None:
        line, character = req.position.line, req.position.character
        await req.respond([CompletionItem(label=f"char{character}line{line}")])


CAPABILITIES = ServerCapabilities(completion_provider=CompletionOptions())


def main() -> None:
    serve(CAPABILITIES, MyHandler())


if __name__ == "__main__":
    main()
