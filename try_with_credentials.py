#!/usr/bin/env python3
"""
Interactive check of the ADT Pulse client against the live portal.

Usage:
    python try_with_credentials.py

This script will:
1. Read your username and password (.env or prompt)
2. Login and print the portal version
3. Read panel status and sensor zones
4. Read the sync cursor
5. Optionally arm/disarm
6. Logout
"""

import asyncio
import getpass
import logging
import os
import sys
from pathlib import Path

import aiohttp
from dotenv import load_dotenv

# Load .env file
load_dotenv()

# Add current dir to path
sys.path.insert(0, str(Path(__file__).parent))

from pyadt_pulse import PulseClient  # noqa: E402


def print_result(step: str, result) -> bool:
    if result.success:
        print(f"✓ {step} successful")
    else:
        print(f"✗ {step} failed ({result.action}): {result.error}")
    return result.success


async def check_full_flow():
    """Walk through every operation against the portal"""

    print("\n" + "=" * 70)
    print("ADT PULSE CLIENT - LIVE PORTAL CHECK")
    print("=" * 70)

    print("\n📧 ADT Pulse Credentials")
    print("-" * 70)
    username = os.getenv("PULSE_USERNAME", "").strip()
    password = os.getenv("PULSE_PASSWORD", "").strip()
    debug = os.getenv("PULSE_DEBUG", "false").lower() == "true"

    if not username:
        username = input("Username: ").strip()
    else:
        print(f"Username: {username}")

    if not password:
        password = getpass.getpass("Password: ")

    if not username or not password:
        print("❌ Username and password are required")
        return

    if debug:
        logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")

    async with aiohttp.ClientSession(cookie_jar=aiohttp.CookieJar()) as http_session:
        client = PulseClient(username, password, debug, session=http_session)

        # Step 1: Login
        print("\n🔐 Step 1: Login")
        print("-" * 70)
        result = await client.login()
        if not print_result("Login", result):
            return
        print(f"  → Portal version: {result.info['version']}")
        print(f"  → Cookies: {[c.key for c in http_session.cookie_jar]}")

        # Step 2: Device status
        print("\n🏠 Step 2: Device Status")
        print("-" * 70)
        result = await client.get_device_status()
        if print_result("Device status", result):
            device = result.info
            print(f"  → {device.name} ({device.make} {device.type})")
            print(f"  → State: {device.state}")
            print(f"  → Status: {device.status or '-'}")

        # Step 3: Zones
        print("\n🚪 Step 3: Zones")
        print("-" * 70)
        result = await client.get_zone_status()
        if print_result("Zone status", result):
            print(f"  Found {len(result.info)} sensor(s)")
            for zone in result.info:
                print(f"  - {zone.name} [{zone.tags}]: {zone.state_name}")

        # Step 4: Sync
        print("\n🔄 Step 4: Portal Sync")
        print("-" * 70)
        result = await client.perform_sync()
        if print_result("Sync", result):
            print(f"  → Sync code: {result.info['syncCode']}")

        # Step 5: Optional arm/disarm
        print("\n🛡 Step 5: Set Device Status (optional)")
        print("-" * 70)
        answer = input("Arm state and mode, e.g. 'disarmed stay' (empty to skip): ").strip()
        if answer:
            arm_state, _, arm = answer.partition(" ")
            try:
                result = await client.set_device_status(arm_state, arm.strip())
            except ValueError as e:
                print(f"⚠ {e}")
            else:
                print_result("Set device status", result)

        # Step 6: Logout
        print("\n👋 Step 6: Logout")
        print("-" * 70)
        print_result("Logout", await client.logout())

        print("\n" + "=" * 70)
        print("✅ DONE")
        print("=" * 70)


async def main():
    """Main entry point"""
    try:
        await check_full_flow()
    except KeyboardInterrupt:
        print("\n\n⏹ Check cancelled by user")


if __name__ == "__main__":
    asyncio.run(main())
