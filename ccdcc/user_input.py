import asyncio
import threading

from typing import Optional


def _resolve(future: asyncio.Future, answer: Optional[str] = None, error: Optional[Exception] = None):
    if future.cancelled():
        return
    if error is not None:
        future.set_exception(error)
    else:
        future.set_result(answer)


async def read_user_prompt(message: str = ">", default: str = "") -> str:
    """
    Asks the user for a line of input without blocking the event loop.
    An empty answer falls back to `default`.
    """
    loop = asyncio.get_running_loop()
    future = loop.create_future()
    suffix = f" ({default})" if default else ""

    # A daemon thread, so a pending read never keeps the process alive after Ctrl-C.
    def read():
        try:
            answer = input(f"{message}{suffix} ")
        except Exception as e:
            loop.call_soon_threadsafe(_resolve, future, None, e)
        else:
            loop.call_soon_threadsafe(_resolve, future, answer)

    threading.Thread(target=read, daemon=True).start()
    answer = await future
    return answer.strip() or default
