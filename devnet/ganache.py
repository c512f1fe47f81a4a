"""
Devnet Process
Spawns a local development chain (ganache or anvil) and tracks its lifetime
"""

import queue
import re
import shutil
import socket
import subprocess
import threading
import time
from typing import List, Optional

from eth_account import Account
from loguru import logger

from utils.exceptions import DevnetError
from .accounts import derive_keys

READY_MARKER = "Listening on"
PRIVATE_KEY_RE = re.compile(r"^\s*\(\d+\)\s+(0x[0-9a-fA-F]{64})\s*$")


def find_free_port(host: str = '127.0.0.1') -> int:
    """Ask the OS for an unused TCP port"""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind((host, 0))
        return sock.getsockname()[1]


class DevnetProcess:
    """
    Handle on a running devnet

    The process lives until stop() is called or the `with` block exits.
    """

    def __init__(self, process: subprocess.Popen, host: str, port: int, keys: List[str]):
        self.process = process
        self.host = host
        self.port = port
        self.keys = keys
        self._reader: Optional[threading.Thread] = None

    @property
    def endpoint(self) -> str:
        return f"http://{self.host}:{self.port}"

    @property
    def addresses(self) -> List[str]:
        return [Account.from_key(key).address for key in self.keys]

    @property
    def running(self) -> bool:
        return self.process.poll() is None

    def stop(self, timeout: float = 5.0):
        """Terminate the devnet, killing it if it does not exit in time"""
        if not self.running:
            return

        logger.debug(f"Stopping devnet (pid {self.process.pid})")
        self.process.terminate()
        try:
            self.process.wait(timeout=timeout)
        except subprocess.TimeoutExpired:
            logger.warning(f"Devnet did not exit within {timeout}s, killing it")
            self.process.kill()
            self.process.wait()

    def __enter__(self) -> "DevnetProcess":
        return self

    def __exit__(self, exc_type, exc, tb):
        self.stop()


class Devnet:
    """
    Builder for a local development chain

    Runs `<binary> -p <port> -m <mnemonic> -a <accounts>`, flags understood by
    both ganache and anvil, and waits until the node reports it is listening.
    """

    def __init__(
        self,
        binary: str = "ganache",
        mnemonic: Optional[str] = None,
        port: Optional[int] = None,
        accounts: int = 10,
        startup_timeout: float = 10.0,
        host: str = '127.0.0.1',
        extra_args: Optional[List[str]] = None,
    ):
        """
        Initialize Devnet builder

        Args:
            binary: Devnet executable (name on PATH or full path)
            mnemonic: Seed phrase for deterministic accounts (None = node's own)
            port: RPC port (None = pick a free one)
            accounts: Number of funded accounts
            startup_timeout: Seconds to wait for the node to start listening
            host: Host the RPC endpoint is reached on
            extra_args: Additional command line arguments
        """
        self.binary = binary
        self.mnemonic = mnemonic
        self.port = port
        self.accounts = accounts
        self.startup_timeout = startup_timeout
        self.host = host
        self.extra_args = list(extra_args or [])

    def command(self, port: int) -> List[str]:
        """Build the command line for the given port"""
        cmd = [self.binary, '-p', str(port), '-a', str(self.accounts)]
        if self.mnemonic:
            cmd += ['-m', self.mnemonic]
        return cmd + self.extra_args

    def spawn(self) -> DevnetProcess:
        """
        Start the devnet and wait until it accepts connections

        Returns:
            DevnetProcess handle

        Raises:
            DevnetError: If the binary is missing, exits early or never becomes ready
        """
        executable = shutil.which(self.binary)
        if executable is None:
            raise DevnetError(f"Devnet binary not found on PATH: {self.binary}")

        port = self.port or find_free_port(self.host)
        cmd = self.command(port)
        cmd[0] = executable

        logger.debug(f"Spawning devnet on port {port}: {self.binary}")
        try:
            process = subprocess.Popen(
                cmd,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                bufsize=1,
            )
        except OSError as e:
            raise DevnetError(f"Failed to start devnet: {e}") from e

        lines: "queue.Queue[Optional[str]]" = queue.Queue()
        reader = threading.Thread(
            target=self._drain, args=(process, lines), name='devnet-output', daemon=True
        )
        reader.start()

        try:
            printed_keys = self._wait_ready(process, lines)
        except DevnetError:
            if process.poll() is None:
                process.kill()
                process.wait()
            raise

        keys = printed_keys
        if not keys and self.mnemonic:
            keys = derive_keys(self.mnemonic, self.accounts)
        handle = DevnetProcess(process, self.host, port, keys)
        handle._reader = reader

        logger.info(f"Devnet started (pid {process.pid}) at {handle.endpoint}")
        return handle

    def _wait_ready(self, process: subprocess.Popen, lines: queue.Queue) -> List[str]:
        """Block until the ready marker; returns the private keys the node printed"""
        deadline = time.monotonic() + self.startup_timeout
        recent: List[str] = []
        keys: List[str] = []

        while True:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                raise DevnetError(
                    f"Devnet did not start within {self.startup_timeout}s: "
                    + ' | '.join(recent[-5:])
                )
            try:
                line = lines.get(timeout=remaining)
            except queue.Empty:
                continue

            if line is None:
                raise DevnetError(
                    f"Devnet exited with code {process.wait()} before it was ready: "
                    + ' | '.join(recent[-5:])
                )

            recent.append(line)
            key = PRIVATE_KEY_RE.match(line)
            if key:
                keys.append(key.group(1))
            if READY_MARKER in line:
                return keys

    @staticmethod
    def _drain(process: subprocess.Popen, lines: queue.Queue):
        # Keeps the pipe empty for the whole life of the process
        for raw in process.stdout:
            line = raw.rstrip()
            if line:
                logger.debug(f"[devnet] {line}")
                lines.put(line)
        lines.put(None)
