"""
Chain Registry Loader
=====================
Loads chain descriptors from a JSON registry file.

Format:
    {
      "chains": [
        {"id": 1, "name": "Ethereum", "rpc": "https://eth.merkle.io"},
        {"id": 11155111, "name": "Sepolia", "rpc": "https://...", "testnet": true},
        {"id": 8453, "name": "Base", "rpc": "https://base-mainnet.g.alchemy.com/v2/${ALCHEMY_KEY}"}
      ]
    }

`${VAR}` placeholders in URLs are substituted from the environment;
entries whose placeholders cannot be resolved are skipped.
"""

import json
import os
import re
from typing import Iterable, List, Optional

from config.settings import Settings
from chaincaps.shared.models import ChainDescriptor
from chaincaps.shared.system.logging import Logger


_ENV_PATTERN = re.compile(r"\$\{([^}]+)\}")


class RegistryError(Exception):
    """Registry file is missing, malformed or contains duplicate chain ids."""


def substitute_env_vars(text: str) -> str:
    """Replace ${VAR} patterns with environment variable values."""
    return _ENV_PATTERN.sub(lambda m: os.getenv(m.group(1), ""), text)


def _has_unresolved(url: str) -> bool:
    return any(not os.getenv(name) for name in _ENV_PATTERN.findall(url))


def parse_registry(data: dict, include_testnets: bool = False) -> List[ChainDescriptor]:
    """Build descriptors from a decoded registry document, preserving order."""
    if not isinstance(data, dict) or not isinstance(data.get("chains"), list):
        raise RegistryError("Registry must be an object with a 'chains' list")

    chains: List[ChainDescriptor] = []
    seen = set()

    for i, entry in enumerate(data["chains"]):
        if not isinstance(entry, dict):
            raise RegistryError(f"Entry #{i} is not an object")
        try:
            chain_id = int(entry["id"])
            name = str(entry["name"])
            url = str(entry["rpc"])
        except (KeyError, TypeError, ValueError) as e:
            raise RegistryError(f"Entry #{i} is missing id/name/rpc: {e}") from e

        if chain_id in seen:
            raise RegistryError(f"Duplicate chain id {chain_id} ({name})")
        seen.add(chain_id)

        if not entry.get("enabled", True):
            continue

        testnet = bool(entry.get("testnet", False))
        if testnet and not include_testnets:
            continue

        if _has_unresolved(url):
            Logger.warning(f"[REGISTRY] Skipping {name} ({chain_id}): unresolved env var in RPC URL")
            continue

        chains.append(ChainDescriptor(
            id=chain_id,
            name=name,
            rpc_endpoint=substitute_env_vars(url),
            testnet=testnet,
        ))

    return chains


def load_registry(path: Optional[str] = None, include_testnets: Optional[bool] = None) -> List[ChainDescriptor]:
    """Load the chain registry JSON file (defaults from Settings)."""
    path = path or Settings.CHAIN_REGISTRY_PATH
    if include_testnets is None:
        include_testnets = Settings.INCLUDE_TESTNETS

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        raise RegistryError(f"Registry not found: {path}") from None
    except json.JSONDecodeError as e:
        raise RegistryError(f"Registry is not valid JSON ({path}): {e}") from e

    chains = parse_registry(data, include_testnets=include_testnets)
    Logger.info(f"[REGISTRY] {len(chains)} chains loaded from {os.path.basename(path)}")
    return chains


def filter_registry(chains: Iterable[ChainDescriptor], chain_ids: Optional[Iterable[int]]) -> List[ChainDescriptor]:
    """Narrow a registry to the given ids, keeping registry order."""
    chains = list(chains)
    if not chain_ids:
        return chains
    wanted = set(chain_ids)
    return [c for c in chains if c.id in wanted]
