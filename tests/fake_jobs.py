"""Job types shared by the test suite."""


class FakeJob:
    performed = []

    @classmethod
    def perform(cls, *args):
        cls.performed.append(args)


class FakeUniqueJob:
    performed = []

    @classmethod
    def perform(cls, *args):
        cls.performed.append(args)


class FailingUniqueJob:
    @classmethod
    def perform(cls, *args):
        raise RuntimeError("Fail")


class UniqueJobWithTtl:
    @classmethod
    def perform(cls, *args):
        pass


class UniqueJobWithLock:
    @classmethod
    def perform(cls, *args):
        pass


