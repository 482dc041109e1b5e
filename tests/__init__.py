# Pass regular log output to devnull; pytest catches log calls by other means

import logging
import os

logging.basicConfig(level=logging.DEBUG, stream=open(os.devnull, "w"))

# Adjust log level for certain modules
logging.getLogger("matplotlib").setLevel(logging.WARNING)

# .. Test-related variables ...................................................

TEST_CFG_DIR: str = os.path.join(os.path.dirname(__file__), "cfg")
"""Directory of YAML files holding test cases"""
