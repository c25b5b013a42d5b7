from ape import networks

from deployment.constants import LOCAL_NETWORKS


def is_local_network() -> bool:
    """Returns True if the connected network is a local (ephemeral) network."""
    return networks.provider.network.name in LOCAL_NETWORKS


def active_chain_id() -> int:
    return networks.provider.chain_id
