#!/usr/bin/env python3
"""
LAN Chat Relay Client - Main Entry Point

Minimal terminal client: prints every line the relay forwards and sends
every line typed on stdin. No prompt redraw or line editing.
"""

import asyncio
import argparse
import sys
import os
import threading

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from relay_client.chat.chat_client import ChatClient
from relay_client.utils.config import ClientConfig
from relay_client.utils.logger import logger
from relay_common.constants import DEFAULT_HOST, DEFAULT_PORT, EXIT_KEYWORD


def read_line_in_background(input_stream) -> asyncio.Future:
    """
    Read one line from input_stream on a daemon thread.

    A read that is still blocked when the client exits does not keep the
    process alive.
    """
    loop = asyncio.get_running_loop()
    future = loop.create_future()

    def resolve(result, error):
        if future.done():
            return
        if error is not None:
            future.set_exception(error)
        else:
            future.set_result(result)

    def read():
        result, error = None, None
        try:
            result = input_stream.readline()
        except Exception as e:
            error = e
        try:
            loop.call_soon_threadsafe(resolve, result, error)
        except RuntimeError:
            logger.debug("Event loop closed before stdin read completed")

    threading.Thread(target=read, name="stdin-reader", daemon=True).start()
    return future


class RelayClient:
    """Main client class: one chat connection driven from the terminal."""

    def __init__(self, config: ClientConfig, output=None):
        self.config = config
        self.chat_client = ChatClient(config.host, config.port)
        self.output = output or sys.stdout

    def show_line(self, line: str):
        print(line, file=self.output, flush=True)

    async def interactive_mode(self, input_stream=None):
        """Run client with interactive chat input."""
        input_stream = input_stream or sys.stdin
        if not await self.chat_client.connect(self.config.retry_count, self.config.retry_base_delay):
            return False

        await self.chat_client.register(self.config.username)
        listener_task = asyncio.create_task(self.chat_client.listen(self.show_line))
        logger.show_interactive_mode_info()

        try:
            while not listener_task.done():
                input_task = read_line_in_background(input_stream)
                done, _ = await asyncio.wait({input_task, listener_task},
                                             return_when=asyncio.FIRST_COMPLETED)
                if listener_task in done:
                    break

                user_input = input_task.result()
                if not user_input:  # EOF on stdin
                    await self.chat_client.leave()
                    break
                text = user_input.rstrip('\r\n')
                if not text.strip():
                    continue
                if not await self.chat_client.send_line(text):
                    break
                if text == EXIT_KEYWORD:
                    break
        finally:
            listener_task.cancel()
            try:
                await listener_task
            except asyncio.CancelledError:
                pass
            await self.chat_client.close()
            logger.info("[INFO] Disconnected from server")
        return True


def main(argv=None):
    parser = argparse.ArgumentParser(description='LAN Chat Relay Client')
    parser.add_argument('--host', type=str, default=DEFAULT_HOST,
                        help=f'Server host (default: {DEFAULT_HOST})')
    parser.add_argument('--port', type=int, default=DEFAULT_PORT,
                        help=f'Server port (default: {DEFAULT_PORT})')
    parser.add_argument('--username', type=str, default=None,
                        help='Display name (prompted if omitted)')
    args = parser.parse_args(argv)

    username = args.username or input("Enter your username: ").strip()
    client = RelayClient(ClientConfig(args.host, args.port, username))

    try:
        ok = asyncio.run(client.interactive_mode())
    except KeyboardInterrupt:
        print("\n[INFO] Client terminated")
        return 0
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
