import unittest

from eth_utils import to_checksum_address

from etherscan_verify.errors import (
    DuplicatedLibraryError,
    InvalidLibraryAddressError,
    LibraryAddressesMismatchError,
    LibraryMultipleMatchesError,
    LibraryNotFoundError,
    MissingLibrariesError,
)
from etherscan_verify.solc import ContractInformation, ContractOutput, extend_contract_information, get_library_information

from helpers import LIBRARY_PLACEHOLDER, contract_output, with_metadata

MATH_ADDRESS = to_checksum_address("0x" + "ab" * 20)
INIT_ADDRESS = to_checksum_address("0x" + "cd" * 20)
OTHER_ADDRESS = to_checksum_address("0x" + "ef" * 20)

MATH_SLOT = {"contracts/Math.sol": {"Math": [{"start": 3, "length": 20}]}}
INIT_SLOT = {"contracts/Init.sol": {"Init": [{"start": 40, "length": 20}]}}


def make_information(link_references, deployed_link_references, deployed_code):
    output = contract_output(
        deployed_object=with_metadata("608073" + LIBRARY_PLACEHOLDER + "6000"),
        link_references=link_references,
        deployed_link_references=deployed_link_references,
    )
    return ContractInformation(
        compiler_input={"language": "Solidity", "sources": {}, "settings": {}},
        solc_long_version="0.8.19+commit.7dd6d404",
        source_name="contracts/Token.sol",
        contract_name="Token",
        contract_output=ContractOutput.model_validate(output),
        deployed_bytecode=deployed_code,
    )


class TestLibraryInformation(unittest.TestCase):
    def setUp(self):
        deployed = "608073" + MATH_ADDRESS[2:].lower() + "6000"
        # Math is linked in the runtime code, Init only in the constructor
        self.information = make_information(
            link_references={**MATH_SLOT, **INIT_SLOT},
            deployed_link_references=MATH_SLOT,
            deployed_code=deployed,
        )

    def test_runtime_libraries_are_detected(self):
        information = make_information(MATH_SLOT, MATH_SLOT, "608073" + MATH_ADDRESS[2:].lower() + "6000")
        library_information = get_library_information(information, {})
        self.assertEqual(library_information.libraries, {"contracts/Math.sol": {"Math": MATH_ADDRESS}})
        self.assertEqual(library_information.undetectable_libraries, [])

    def test_undetectable_libraries_must_be_given(self):
        with self.assertRaises(MissingLibrariesError) as ctx:
            get_library_information(self.information, {})
        self.assertEqual(ctx.exception.missing_libraries, ["contracts/Init.sol:Init"])

    def test_user_and_detected_libraries_are_merged(self):
        library_information = get_library_information(self.information, {"Init": INIT_ADDRESS.lower()})
        self.assertEqual(
            library_information.libraries,
            {
                "contracts/Init.sol": {"Init": INIT_ADDRESS},
                "contracts/Math.sol": {"Math": MATH_ADDRESS},
            },
        )
        self.assertEqual(library_information.undetectable_libraries, ["contracts/Init.sol:Init"])

        extended = extend_contract_information(self.information, library_information)
        self.assertEqual(extended.undetectable_libraries, ("contracts/Init.sol:Init",))
        self.assertEqual(extended.contract_name, "Token")

    def test_consistent_detectable_address_is_accepted(self):
        library_information = get_library_information(
            self.information, {"contracts/Math.sol:Math": MATH_ADDRESS.lower(), "Init": INIT_ADDRESS}
        )
        self.assertEqual(library_information.libraries["contracts/Math.sol"]["Math"], MATH_ADDRESS)

    def test_conflicting_detectable_address(self):
        with self.assertRaises(LibraryAddressesMismatchError) as ctx:
            get_library_information(self.information, {"Math": OTHER_ADDRESS, "Init": INIT_ADDRESS})
        self.assertIn(OTHER_ADDRESS, ctx.exception.message)
        self.assertIn(MATH_ADDRESS, ctx.exception.message)

    def test_unknown_library(self):
        with self.assertRaises(LibraryNotFoundError) as ctx:
            get_library_information(self.information, {"Unknown": OTHER_ADDRESS, "Init": INIT_ADDRESS})
        self.assertIn("contracts/Init.sol:Init", ctx.exception.message)
        self.assertIn("contracts/Math.sol:Math (optional)", ctx.exception.message)

    def test_invalid_address(self):
        with self.assertRaises(InvalidLibraryAddressError):
            get_library_information(self.information, {"Init": "0x1234"})

    def test_same_library_given_twice(self):
        with self.assertRaises(DuplicatedLibraryError):
            get_library_information(
                self.information,
                {"Init": INIT_ADDRESS, "contracts/Init.sol:Init": INIT_ADDRESS},
            )

    def test_ambiguous_bare_name(self):
        information = make_information(
            link_references={
                "contracts/Init.sol": {"Init": [{"start": 40, "length": 20}]},
                "contracts/legacy/Init.sol": {"Init": [{"start": 80, "length": 20}]},
            },
            deployed_link_references={},
            deployed_code="6080",
        )
        with self.assertRaises(LibraryMultipleMatchesError) as ctx:
            get_library_information(information, {"Init": INIT_ADDRESS})
        self.assertIn("contracts/legacy/Init.sol:Init", ctx.exception.message)

    def test_resolved_table_is_accepted_back_as_input(self):
        first = get_library_information(self.information, {"Init": INIT_ADDRESS})
        flattened = {
            f"{source_name}:{library_name}": address
            for source_name, libraries in first.libraries.items()
            for library_name, address in libraries.items()
        }
        second = get_library_information(self.information, flattened)
        self.assertEqual(second.libraries, first.libraries)


if __name__ == '__main__':
    unittest.main()
