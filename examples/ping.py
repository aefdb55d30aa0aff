import asyncio
import sys

from gufo.httpping import (
    HttpTransport,
    Probe,
    RunState,
    Statistics,
    Success,
    resolve,
)


async def main(uri: str, count: int = 4) -> None:
    target = await resolve(uri)
    print(f"PING {target.url} ({target.address})")
    state = RunState()
    async with HttpTransport() as transport:
        probe = Probe(transport, count=count)
        async for attempt in probe.iter_attempts(target, state):
            if isinstance(attempt.outcome, Success):
                rtt = attempt.outcome.duration * 1000.0
                print(f"seq={attempt.seq} time={rtt:.3f}ms")
            else:
                print(f"seq={attempt.seq} {attempt.outcome}")
    print(Statistics.from_state(state))


if __name__ == "__main__":
    asyncio.run(main(sys.argv[1]))
