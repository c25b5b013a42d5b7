from pathlib import Path

import deployment

#
# Filesystem
#

DEPLOYMENT_DIR = Path(deployment.__file__).parent
CONSTRUCTOR_PARAMS_DIR = DEPLOYMENT_DIR / "constructor_params"
ARTIFACTS_DIR = DEPLOYMENT_DIR / "artifacts"
DEFAULT_REGISTRY_FILENAME = "ens-dao.json"

#
# Networks
#

LOCAL_NETWORKS = ["local"]

#
# Contracts
#

ENS_DAO_TOKEN = "ENSDaoToken"
ENS_LABEL_BOOKER = "ENSLabelBooker"
ENS_DAO_REGISTRAR = "ENSDaoRegistrar"

ENS_DEPLOYER = "ENSDeployer"

# role -> (contract name, ENSDeployer accessor)
ENS_STACK = {
    "registry": ("ENSRegistry", "ens"),
    "registrar": ("EthRegistrar", "ethRegistrar"),
    "reverseRegistrar": ("ReverseRegistrar", "reverseRegistrar"),
    "publicResolver": ("PublicResolver", "publicResolver"),
    "nameWrapper": ("NameWrapper", "nameWrapper"),
}

#
# ENS DAO
#

ETH_TLD = "eth"

DEFAULT_DOMAIN_NAME = "sismo"
DEFAULT_DAO_TOKEN_SYMBOL = "SDAO"
DAO_TOKEN_BASE_URI = "https://tokens.sismo.io/"

ONE_WEEK = 7 * 24 * 60 * 60
DEFAULT_RESERVATION_DURATION = 4 * ONE_WEEK  # 2419200

# used when deploying the DAO on top of a freshly deployed ENS stack
FULL_STACK_DOMAIN_NAME = "sismo"
FULL_STACK_DAO_TOKEN_SYMBOL = "SISMO"
