"""
Officer Registry Test Suite

Covers registration, verification, status checks, lookups and the
consistency of registry state across operations.
"""

import threading
import unittest

from officer_registry import (
    ErrorKind,
    InMemoryOfficerStore,
    Officer,
    OfficerRegistry,
    OfficerStatus,
    RegistryError,
    RegistryJournal,
    EventType,
    Outcome,
)

OWNER = "SP2J6ZY48GV1EZ5V2V5RB9MP66SW86PYKKNRV9EJ7"
NON_OWNER = "SP1234567890ABCDEF"
FIXED_TIME = 1700000000000


def fixed_clock():
    return FIXED_TIME


class TestOfficerRegistration(unittest.TestCase):
    """Registration is owner-only and one officer per principal."""

    def setUp(self):
        self.registry = OfficerRegistry(owner=OWNER, clock=fixed_clock)

    def test_owner_registers_new_officer(self):
        result = self.registry.register(
            "John Doe", "Certified Compliance Professional", 1000000, OWNER
        )

        self.assertTrue(result.ok())
        self.assertEqual(result.value, 1)
        self.assertEqual(len(self.registry), 1)
        self.assertEqual(self.registry.next_id, 2)

    def test_registered_officer_fields(self):
        self.registry.register("John Doe", "CCP", 1000000, OWNER)

        officer = self.registry.get_officer_by_id(1)

        self.assertEqual(officer.to_dict(), {
            "id": 1,
            "principal": OWNER,
            "name": "John Doe",
            "certification": "CCP",
            "verified": False,
            "verificationDate": 0,
            "expiryDate": 1000000,
        })
        self.assertEqual(officer.status, OfficerStatus.UNVERIFIED)

    def test_non_owner_rejected(self):
        result = self.registry.register("Jane Doe", "Compliance Expert", 1000000, NON_OWNER)

        self.assertFalse(result.ok())
        self.assertEqual(result.error, ErrorKind.NOT_OWNER)
        self.assertEqual(len(self.registry), 0)
        self.assertEqual(self.registry.next_id, 1)
        self.assertIsNone(self.registry.get_officer_by_principal(NON_OWNER))

    def test_duplicate_registration_rejected(self):
        self.registry.register("John Doe", "Certified Compliance Professional", 1000000, OWNER)

        result = self.registry.register("John Doe Updated", "Updated Certification", 2000000, OWNER)

        self.assertEqual(result.error, ErrorKind.ALREADY_REGISTERED)
        self.assertEqual(len(self.registry), 1)
        self.assertEqual(self.registry.next_id, 2)

        officer = self.registry.get_officer_by_id(1)
        self.assertEqual(officer.name, "John Doe")
        self.assertEqual(officer.certification, "Certified Compliance Professional")
        self.assertEqual(officer.expiry_date, 1000000)

    def test_rejects_non_integer_expiry(self):
        with self.assertRaises(TypeError):
            self.registry.register("John Doe", "CCP", "1000000", OWNER)
        with self.assertRaises(TypeError):
            self.registry.register("John Doe", "CCP", True, OWNER)
        self.assertEqual(len(self.registry), 0)

    def test_expiry_is_stored_not_enforced(self):
        result = self.registry.register("John Doe", "CCP", 1, OWNER)
        self.assertTrue(result.ok())
        self.assertTrue(self.registry.verify(1, OWNER).ok())
        self.assertTrue(self.registry.is_verified(OWNER))

    def test_owner_is_required(self):
        with self.assertRaises(ValueError):
            OfficerRegistry(owner="")


class TestOfficerVerification(unittest.TestCase):
    """Verification is owner-only and targets an existing officer."""

    def setUp(self):
        self.registry = OfficerRegistry(owner=OWNER, clock=fixed_clock)
        self.registry.register("John Doe", "Certified Compliance Professional", 1000000, OWNER)

    def test_owner_verifies_officer(self):
        result = self.registry.verify(1, OWNER)

        self.assertTrue(result.ok())
        self.assertIs(result.value, True)

        officer = self.registry.get_officer_by_id(1)
        self.assertTrue(officer.verified)
        self.assertGreater(officer.verification_date, 0)
        self.assertEqual(officer.verification_date, FIXED_TIME)
        self.assertEqual(officer.status, OfficerStatus.VERIFIED)

    def test_non_owner_rejected(self):
        result = self.registry.verify(1, NON_OWNER)

        self.assertEqual(result.error, ErrorKind.NOT_OWNER)
        officer = self.registry.get_officer_by_id(1)
        self.assertFalse(officer.verified)
        self.assertEqual(officer.verification_date, 0)

    def test_non_owner_checked_before_existence(self):
        result = self.registry.verify(999, NON_OWNER)
        self.assertEqual(result.error, ErrorKind.NOT_OWNER)

    def test_unknown_officer_rejected(self):
        result = self.registry.verify(999, OWNER)
        self.assertEqual(result.error, ErrorKind.INVALID_OFFICER)

    def test_non_integer_id_rejected(self):
        self.assertEqual(self.registry.verify("1", OWNER).error, ErrorKind.INVALID_OFFICER)
        self.assertFalse(self.registry.get_officer_by_id(1).verified)

    def test_reverification_restamps_date(self):
        ticks = iter([100, 200])
        registry = OfficerRegistry(owner=OWNER, clock=lambda: next(ticks))
        registry.register("John Doe", "CCP", 1000000, OWNER)

        registry.verify(1, OWNER)
        self.assertEqual(registry.get_officer_by_id(1).verification_date, 100)

        self.assertTrue(registry.verify(1, OWNER).ok())
        officer = registry.get_officer_by_id(1)
        self.assertTrue(officer.verified)
        self.assertEqual(officer.verification_date, 200)

    def test_default_clock_stamps_positive_time(self):
        registry = OfficerRegistry(owner=OWNER)
        registry.register("John Doe", "CCP", 1000000, OWNER)
        registry.verify(1, OWNER)
        self.assertGreater(registry.get_officer_by_id(1).verification_date, 0)


class TestOfficerStatus(unittest.TestCase):

    def setUp(self):
        self.registry = OfficerRegistry(owner=OWNER, clock=fixed_clock)

    def test_unknown_principal_is_not_verified(self):
        self.assertIs(self.registry.is_verified(NON_OWNER), False)

    def test_unverified_officer_is_not_verified(self):
        self.registry.register("John Doe", "CCP", 1000000, OWNER)
        self.assertIs(self.registry.is_verified(OWNER), False)

    def test_verified_officer_is_verified(self):
        self.registry.register("John Doe", "CCP", 1000000, OWNER)
        self.registry.verify(1, OWNER)
        self.assertIs(self.registry.is_verified(OWNER), True)


class TestOfficerLookup(unittest.TestCase):

    def setUp(self):
        self.registry = OfficerRegistry(owner=OWNER, clock=fixed_clock)

    def test_get_by_id(self):
        self.registry.register("John Doe", "Certified Compliance Professional", 1000000, OWNER)

        officer = self.registry.get_officer_by_id(1)

        self.assertIsNotNone(officer)
        self.assertEqual(officer.name, "John Doe")
        self.assertEqual(officer.certification, "Certified Compliance Professional")
        self.assertFalse(officer.verified)

    def test_get_by_unknown_id(self):
        self.assertIsNone(self.registry.get_officer_by_id(999))
        self.assertIsNone(self.registry.get_officer_by_id("1"))

    def test_get_by_principal(self):
        self.registry.register("John Doe", "Certified Compliance Professional", 1000000, OWNER)

        officer = self.registry.get_officer_by_principal(OWNER)

        self.assertIsNotNone(officer)
        self.assertEqual(officer.name, "John Doe")
        self.assertEqual(officer.principal, OWNER)

    def test_get_by_unknown_principal(self):
        self.assertIsNone(self.registry.get_officer_by_principal(NON_OWNER))

    def test_returned_officer_cannot_alter_registry(self):
        self.registry.register("John Doe", "CCP", 1000000, OWNER)
        officer = self.registry.get_officer_by_id(1)

        with self.assertRaises(AttributeError):
            officer.verified = True

        self.assertFalse(self.registry.is_verified(OWNER))


class TestDataIntegrity(unittest.TestCase):

    def test_consistent_state_across_operations(self):
        # A second owner over the same store stands in for a second administrator
        officer1 = "SP1111111111111111"
        store = InMemoryOfficerStore()
        first = OfficerRegistry(owner=OWNER, store=store, clock=fixed_clock)
        second = OfficerRegistry(owner=officer1, store=store, clock=fixed_clock)

        self.assertEqual(first.register("Officer 1", "Cert 1", 1000000, OWNER).value, 1)
        self.assertEqual(second.register("Officer 2", "Cert 2", 2000000, officer1).value, 2)

        self.assertEqual(len(first), 2)
        self.assertEqual(first.next_id, 3)

        first_officer = first.get_officer_by_id(1)
        second_officer = first.get_officer_by_id(2)
        self.assertEqual(first_officer.name, "Officer 1")
        self.assertEqual(second_officer.name, "Officer 2")
        self.assertEqual(first_officer.principal, OWNER)
        self.assertEqual(second_officer.principal, officer1)

        self.assertEqual(first.get_officer_by_principal(officer1), second_officer)
        self.assertEqual(second.get_officer_by_principal(OWNER), first_officer)

    def test_owner_is_fixed_per_registry(self):
        officer1 = "SP1111111111111111"
        store = InMemoryOfficerStore()
        first = OfficerRegistry(owner=OWNER, store=store)
        OfficerRegistry(owner=officer1, store=store).register("Officer 2", "Cert 2", 1, officer1)

        self.assertEqual(first.verify(1, officer1).error, ErrorKind.NOT_OWNER)
        self.assertEqual(first.register("x", "y", 1, officer1).error, ErrorKind.NOT_OWNER)

    def test_list_officers_ordered_by_id(self):
        store = InMemoryOfficerStore()
        for principal in ("SP-A", "SP-B", "SP-C"):
            OfficerRegistry(owner=principal, store=store).register(principal, "Cert", 1, principal)

        registry = OfficerRegistry(owner="SP-A", store=store)
        self.assertEqual([o.id for o in registry.list_officers()], [1, 2, 3])
        self.assertEqual([o.principal for o in registry.list_officers()], ["SP-A", "SP-B", "SP-C"])

    def test_concurrent_duplicate_registration(self):
        registry = OfficerRegistry(owner=OWNER)
        results = []
        lock = threading.Lock()
        barrier = threading.Barrier(8)

        def worker(i):
            barrier.wait()
            r = registry.register(f"Officer {i}", "Cert", 1, OWNER)
            with lock:
                results.append(r)

        threads = [threading.Thread(target=worker, args=(i,)) for i in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        self.assertEqual(sum(1 for r in results if r.ok()), 1)
        self.assertEqual(
            sum(1 for r in results if r.error == ErrorKind.ALREADY_REGISTERED), 7
        )
        self.assertEqual(len(registry), 1)
        self.assertEqual(registry.next_id, 2)


class TestResults(unittest.TestCase):

    def test_result_serialization(self):
        registry = OfficerRegistry(owner=OWNER)

        self.assertEqual(registry.register("John Doe", "CCP", 1, OWNER).to_dict(), {"ok": 1})
        self.assertEqual(registry.verify(1, OWNER).to_dict(), {"ok": True})
        self.assertEqual(registry.verify(1, NON_OWNER).to_dict(), {"error": "NotOwner"})
        self.assertEqual(registry.verify(5, OWNER).to_dict(), {"error": "InvalidOfficer"})
        self.assertEqual(
            registry.register("John Doe", "CCP", 1, OWNER).to_dict(),
            {"error": "AlreadyRegistered"}
        )

    def test_unwrap(self):
        registry = OfficerRegistry(owner=OWNER)
        self.assertEqual(registry.register("John Doe", "CCP", 1, OWNER).unwrap(), 1)

        with self.assertRaises(RegistryError) as ctx:
            registry.verify(42, OWNER).unwrap()
        self.assertEqual(ctx.exception.kind, ErrorKind.INVALID_OFFICER)


class TestRegistryJournaling(unittest.TestCase):

    def test_write_attempts_are_journaled(self):
        journal = RegistryJournal()
        registry = OfficerRegistry(owner=OWNER, clock=fixed_clock, journal=journal)

        registry.register("John Doe", "CCP", 1, OWNER)
        registry.register("John Doe", "CCP", 1, NON_OWNER)
        registry.verify(999, OWNER)
        registry.verify(1, OWNER)

        entries = journal.entries()
        self.assertEqual([e.event_type for e in entries], [
            EventType.REGISTER, EventType.REGISTER, EventType.VERIFY, EventType.VERIFY
        ])
        self.assertEqual([e.outcome for e in entries], [
            Outcome.ACCEPTED, Outcome.REJECTED, Outcome.REJECTED, Outcome.ACCEPTED
        ])
        self.assertEqual(entries[1].reason, "NotOwner")
        self.assertEqual(entries[2].reason, "InvalidOfficer")
        self.assertEqual(entries[3].officer_id, 1)

    def test_reads_are_not_journaled(self):
        journal = RegistryJournal()
        registry = OfficerRegistry(owner=OWNER, journal=journal)

        registry.is_verified(OWNER)
        registry.get_officer_by_id(1)
        registry.get_officer_by_principal(OWNER)

        self.assertEqual(len(journal), 0)


class TestAuditLogging(unittest.TestCase):

    def test_registration_logged(self):
        registry = OfficerRegistry(owner=OWNER)

        with self.assertLogs("officer_registry.audit", level="INFO") as cm:
            registry.register("John Doe", "CCP", 1, OWNER)

        self.assertEqual(cm.records[0].event_fields["event_type"], "OFFICER_REGISTERED")
        self.assertEqual(cm.records[0].event_fields["officer_id"], 1)

    def test_non_owner_write_raises_security_event(self):
        registry = OfficerRegistry(owner=OWNER)

        with self.assertLogs("officer_registry.audit", level="WARNING") as cm:
            registry.verify(1, NON_OWNER)

        events = [r.event_fields["event_type"] for r in cm.records]
        self.assertIn("VERIFICATION_REJECTED", events)
        self.assertIn("SECURITY_EVENT", events)


class TestOfficerRecord(unittest.TestCase):

    def test_round_trip(self):
        officer = Officer(
            id=3, principal="SP-X", name="N", certification="C",
            expiry_date=5, verified=True, verification_date=10,
        )
        self.assertEqual(Officer.from_dict(officer.to_dict()), officer)

    def test_verified_requires_date(self):
        with self.assertRaises(ValueError):
            Officer(id=1, principal="SP-X", name="N", certification="C",
                    expiry_date=5, verified=True, verification_date=0)

    def test_invalid_id(self):
        with self.assertRaises(ValueError):
            Officer(id=0, principal="SP-X", name="N", certification="C", expiry_date=5)

    def test_missing_fields(self):
        with self.assertRaises(ValueError):
            Officer.from_dict({"id": 1, "principal": "SP-X"})


if __name__ == "__main__":
    unittest.main()
