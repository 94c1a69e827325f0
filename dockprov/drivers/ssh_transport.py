"""SSH transport: run commands and write files on remote hosts via SSH/SCP."""

import asyncio
import logging
import os
import tempfile

from dockprov.drivers.shell import run_shell_cmd

logger = logging.getLogger(__name__)


def ssh_base_args(server, ssh_key, ssh_port):
    """Build base SSH arguments."""
    args = [
        "ssh",
        "-o", "StrictHostKeyChecking=no",
        "-o", "UserKnownHostsFile=/dev/null",
        "-o", "BatchMode=yes",
        "-o", "LogLevel=quiet",
        "-o", "ServerAliveInterval=60",
        "-o", "ServerAliveCountMax=5",
    ]
    if ssh_key:
        args += ["-i", ssh_key]
    if ssh_port and ssh_port != 22:
        args += ["-p", str(ssh_port)]
    args.append(server)
    return args


def make_run_cmd(server, ssh_key, ssh_port, dry_run=False, timeout=None):
    """Create a run_cmd callable for SSH execution.

    The returned coroutine function takes a shell command string and returns
    ``(returncode, stdout, stderr)``. With ``log_output=True`` remote output is
    streamed line by line to the DEBUG log while it is collected.
    """

    async def run_cmd(command, log_output=False):
        if dry_run:
            logger.info(f"[dry-run] ssh {server}: {command}")
            return 0, "", ""

        ssh_args = ssh_base_args(server, ssh_key, ssh_port)
        ssh_args.append(command)

        if not log_output:
            return await run_shell_cmd(ssh_args, timeout=timeout)

        try:
            proc = await asyncio.create_subprocess_exec(
                *ssh_args,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError:
            logger.error("Error: 'ssh' not found. Is it installed and on PATH?")
            return 127, "", "'ssh' not found"

        stdout_lines, stderr_lines = [], []

        async def _read_stream(pipe, lines):
            async for raw_line in pipe:
                line = raw_line.decode(errors="replace").rstrip("\n")
                logger.debug(f"[{server}] {line}")
                lines.append(line)

        try:
            await asyncio.wait_for(
                asyncio.gather(
                    _read_stream(proc.stdout, stdout_lines),
                    _read_stream(proc.stderr, stderr_lines),
                    proc.wait(),
                ),
                timeout=timeout,
            )
        except TimeoutError:
            logger.error(f"Command timed out after {timeout}s: {command}")
            proc.kill()
            await proc.wait()
            return 1, "\n".join(stdout_lines), f"timed out after {timeout}s"
        return proc.returncode, "\n".join(stdout_lines), "\n".join(stderr_lines)

    return run_cmd


async def scp_file(local_path, server, ssh_key, ssh_port, remote_path, timeout=300):
    """Copy a file to the remote server via SCP.

    Returns:
        (returncode, stderr) tuple
    """
    scp_args = [
        "scp",
        "-o", "StrictHostKeyChecking=no",
        "-o", "UserKnownHostsFile=/dev/null",
        "-o", "BatchMode=yes",
        "-o", "LogLevel=quiet",
        "-o", "ServerAliveInterval=60",
        "-o", "ServerAliveCountMax=5",
    ]
    if ssh_key:
        scp_args += ["-i", ssh_key]
    if ssh_port and ssh_port != 22:
        scp_args += ["-P", str(ssh_port)]
    scp_args += [local_path, f"{server}:{remote_path}"]

    try:
        proc = await asyncio.create_subprocess_exec(
            *scp_args,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except FileNotFoundError:
        logger.error("Error: 'scp' not found. Is it installed and on PATH?")
        return 127, "'scp' not found"

    try:
        _, stderr_bytes = await asyncio.wait_for(proc.communicate(), timeout=timeout)
    except TimeoutError:
        logger.error(f"SCP timed out after {timeout}s: {local_path} -> {server}:{remote_path}")
        proc.kill()
        await proc.wait()
        return 1, f"timed out after {timeout}s"
    stderr = stderr_bytes.decode(errors="replace") if stderr_bytes else ""
    return proc.returncode, stderr


def make_write_file(server, ssh_key, ssh_port, dry_run=False):
    """Create a write_file callable that SCPs content to the remote server.

    The returned coroutine function takes a remote path and the file content
    and returns ``(returncode, stderr)``. Content only travels inside the
    copied file, never on a command line. The local temp file is created 0600
    and removed afterwards.
    """

    async def write_file(remote_path, content):
        if dry_run:
            logger.info(f"[dry-run] scp -> {server}:{remote_path}")
            return 0, ""

        with tempfile.NamedTemporaryFile(mode="w", prefix="dockprov-", delete=False) as f:
            f.write(content)
            tmp_path = f.name

        try:
            return await scp_file(tmp_path, server, ssh_key, ssh_port, remote_path)
        finally:
            os.unlink(tmp_path)

    return write_file
