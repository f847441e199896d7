# Copyright © Aptos Foundation
# SPDX-License-Identifier: Apache-2.0

"""
Shared configuration for the example scripts.

Environment Variables:
    MULTISIG_LOG_LEVEL: Logging level for the multisig_sdk loggers
        (default: INFO). Use DEBUG to see every rejected member signature.
    MULTISIG_MESSAGE: Personal message the committee signs
        (default: "Hello, multisig!").
"""

import logging
import os

LOG_LEVEL = os.getenv("MULTISIG_LOG_LEVEL", "INFO").upper()

MESSAGE = os.getenv("MULTISIG_MESSAGE", "Hello, multisig!")


def configure_logging():
    logging.basicConfig(
        level=LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
