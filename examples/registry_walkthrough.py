#!/usr/bin/env python3
"""
Officer Registry walkthrough

Registers and verifies an officer, shows the rejected paths, checks the
event journal and issues a signed attestation.

Install the package, then run from the repository root:
    pip install -e .
    python examples/registry_walkthrough.py
"""

import json

from officer_registry import (
    AttestationService,
    OfficerRegistry,
    RegistryJournal,
    configure_logging,
    set_correlation_id,
    verify_attestation,
    verify_chain,
)

OWNER = "SP2J6ZY48GV1EZ5V2V5RB9MP66SW86PYKKNRV9EJ7"
STRANGER = "SP1234567890ABCDEF"


def main():
    configure_logging(level="WARNING", json_format=True)
    set_correlation_id("walkthrough-001")

    journal = RegistryJournal()
    registry = OfficerRegistry(owner=OWNER, journal=journal)

    print("=" * 60)
    print("Officer Registry Walkthrough")
    print("=" * 60)

    print("\nRegister (owner):      ", registry.register("John Doe", "CCP", 1000000, OWNER).to_dict())
    print("Register (stranger):   ", registry.register("Jane Doe", "CCP", 1000000, STRANGER).to_dict())
    print("Register (duplicate):  ", registry.register("John Again", "CCP", 2, OWNER).to_dict())
    print("Verified before:       ", registry.is_verified(OWNER))
    print("Verify 999:            ", registry.verify(999, OWNER).to_dict())
    print("Verify 1 (stranger):   ", registry.verify(1, STRANGER).to_dict())
    print("Verify 1 (owner):      ", registry.verify(1, OWNER).to_dict())
    print("Verified after:        ", registry.is_verified(OWNER))

    officer = registry.get_officer_by_principal(OWNER)
    print("\nOfficer record:")
    print(json.dumps(officer.to_dict(), indent=2))

    print(f"\nJournal entries: {len(journal)}")
    broken = verify_chain(journal.entries())
    print("Journal chain:   ", "intact" if broken is None else f"broken at seq {broken}")

    service = AttestationService.generate("kid:walkthrough-001")
    attestation = service.issue(officer)
    print("\nAttestation check:", verify_attestation(attestation, service.trust_entry()).value)

    print("\n" + "=" * 60)


if __name__ == "__main__":
    main()
