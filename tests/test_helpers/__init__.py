from .fake_ledger import FakeLedger, TEST_SIGNATURE
from .orchestrator_creator import (
    TEST_COLLECTION, TEST_RPC_URL, TEST_TREE, create_test_config, create_test_orchestrator, make_identity
)
