"""Device-side signin client.

Collects the local hardware/OS fingerprint and signs in to the console.
"""
import argparse
import logging
import os
import platform
import socket
import sys
import uuid
from pathlib import Path

import requests

logger = logging.getLogger(__name__)

DMI_DIR = Path("/sys/class/dmi/id")
DEFAULT_SERVER = "http://localhost:8000"


def read_dmi(name: str, dmi_dir: Path = DMI_DIR) -> str | None:
    """Read a DMI attribute, None when absent or not readable (non-root)."""
    try:
        value = (dmi_dir / name).read_text().strip()
    except OSError:
        return None
    return value or None


def get_mac_address() -> str | None:
    node = uuid.getnode()
    # Bit multicast posé: adresse aléatoire, pas une vraie MAC
    if (node >> 40) & 1:
        return None
    return ":".join(f"{(node >> shift) & 0xff:02x}" for shift in range(40, -8, -8))


def collect_identity(dmi_dir: Path = DMI_DIR) -> dict:
    return {
        "hostname": socket.gethostname(),
        "os": f"{platform.system()} {platform.release()}".strip() or None,
        "arch": platform.machine() or None,
        "cpu": platform.processor() or None,
        "mac_address": get_mac_address(),
        "system_uuid": read_dmi("product_uuid", dmi_dir),
        "motherboard_serial": read_dmi("board_serial", dmi_dir),
        "disk_serial": None,
        "cpu_id": None,
    }


def signin(server: str, password: str, identity: dict, timeout: float = 10) -> requests.Response:
    payload = {"password": password}
    payload.update({k: v for k, v in identity.items() if v is not None})
    return requests.post(f"{server.rstrip('/')}/api/device/signin", json=payload, timeout=timeout)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Sign this machine in to the device console")
    parser.add_argument("--server", default=os.environ.get("DEVICE_CONSOLE_URL", DEFAULT_SERVER))
    parser.add_argument("--password", default=os.environ.get("DEVICE_CONSOLE_API_PASSWORD"))
    parser.add_argument("--timeout", type=float, default=10)
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    if not args.password:
        logger.error("No API password given (--password or DEVICE_CONSOLE_API_PASSWORD)")
        return 1

    identity = collect_identity()
    try:
        response = signin(args.server, args.password, identity, timeout=args.timeout)
    except requests.exceptions.RequestException as e:
        logger.error("Could not reach %s: %s", args.server, e)
        return 1

    if response.status_code == 200:
        data = response.json()
        logger.info("%s (device id %s)", data.get("message"), data.get("device_id"))
        return 0

    try:
        error = response.json().get("error")
    except ValueError:
        error = response.text
    logger.error("Signin refused (%s): %s", response.status_code, error)
    return 1


if __name__ == "__main__":
    sys.exit(main())
