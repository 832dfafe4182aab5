from dataclasses import dataclass

SSE_PATH = "/sse"
SSE_MESSAGE_PATH = "/sse/message"
DIRECT_PATH = "/mcp"

TRANSPORT_SSE = "sse"
TRANSPORT_SSE_MESSAGE = "sse_message"
TRANSPORT_DIRECT = "direct"
TRANSPORT_NONE = "not_found"

_TRANSPORTS_BY_PATH = {
    SSE_PATH: TRANSPORT_SSE,
    SSE_MESSAGE_PATH: TRANSPORT_SSE_MESSAGE,
    DIRECT_PATH: TRANSPORT_DIRECT,
}


@dataclass(frozen=True)
class TransportDecision:
    transport: str
    path: str

    @property
    def found(self) -> bool:
        return self.transport != TRANSPORT_NONE


def decide_transport(path: str) -> TransportDecision:
    # Exact match only: "/sse/" and "//mcp" are not transport paths.
    return TransportDecision(
        transport=_TRANSPORTS_BY_PATH.get(path, TRANSPORT_NONE),
        path=path,
    )
