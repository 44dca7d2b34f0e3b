"""
Network configuration for the Alphabill SDK.
"""
import importlib.resources
import json
import os
from typing import Any, Dict, Optional


class NetworkConfig:
    """Known Alphabill networks and the RPC endpoints of their partitions."""

    _networks_cache: Optional[Dict[str, Any]] = None

    @classmethod
    def load_networks(cls) -> Dict[str, Any]:
        """
        Load network configurations from the bundled networks.json

        Returns:
            Dictionary of network name to network configuration
        """
        if cls._networks_cache is not None:
            return cls._networks_cache
        path = importlib.resources.files("alphabill_sdk").joinpath("networks.json")
        with path.open("r", encoding="utf-8") as f:
            cls._networks_cache = json.load(f)
        return cls._networks_cache

    @classmethod
    def get_network(cls, network: str) -> Dict[str, Any]:
        """
        Get the configuration of a network

        Raises:
            ValueError: If the network is unknown
        """
        networks = cls.load_networks()
        if network not in networks:
            available = ", ".join(sorted(networks.keys()))
            raise ValueError(f"Unknown network: {network}. Available networks: {available}")
        return networks[network]

    @classmethod
    def get_partition(cls, network: str, partition: str) -> Dict[str, Any]:
        """
        Get the configuration of a partition of a network

        Raises:
            ValueError: If the network or partition is unknown
        """
        partitions = cls.get_network(network).get("partitions", {})
        if partition not in partitions:
            available = ", ".join(sorted(partitions.keys()))
            raise ValueError(
                f"Unknown partition '{partition}' in network {network}. Available partitions: {available}"
            )
        return partitions[partition]

    @classmethod
    def get_rpc_url(cls, network: str, partition: str, override: Optional[str] = None) -> str:
        """
        Get the RPC URL of a partition

        The URL is taken from ``override`` if given, then from the
        ``{NETWORK}_{PARTITION}_RPC_URL`` environment variable, then from
        networks.json.
        """
        if override:
            return override
        env_var = f"{network}_{partition}_RPC_URL".upper().replace("-", "_")
        env_value = os.environ.get(env_var)
        if env_value:
            return env_value
        return cls.get_partition(network, partition)["rpc"]

    @classmethod
    def get_network_id(cls, network: str) -> int:
        return int(cls.get_network(network)["networkId"])

    @classmethod
    def get_partition_id(cls, network: str, partition: str) -> int:
        return int(cls.get_partition(network, partition)["partitionId"])
