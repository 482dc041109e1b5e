"""Takes care of all YAML-related imports and configuration

The ``ruamel.yaml.YAML`` object used here is imported from :py:mod:`yayaml`
and specialized such that it can dump the numeric types a figure works with.
"""

import logging

import numpy as np
from yayaml import add_yaml_error_hint, load_yml, write_yml, yaml

log = logging.getLogger(__name__)

# -- YAML configuration -------------------------------------------------------

yaml.default_flow_style = False

# -- Special representers -----------------------------------------------------
# Sizes and ranges may be given as numpy scalars; store them as plain numbers


def _represent_np_float(representer, node):
    return representer.represent_float(float(node))


def _represent_np_int(representer, node):
    return representer.represent_int(int(node))


yaml.representer.add_representer(np.float64, _represent_np_float)
yaml.representer.add_representer(np.float32, _represent_np_float)
yaml.representer.add_representer(np.int64, _represent_np_int)
yaml.representer.add_representer(np.int32, _represent_np_int)

add_yaml_error_hint(
    lambda e: "formats" in str(e),
    "Entries of the `formats` mapping need to be mappings with the keys "
    "`terminal`, `unit`, and (optionally) `options`.",
)
