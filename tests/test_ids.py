"""Tests for id generators."""
import threading

import pytest

from rdflite.ids import CounterIdGenerator, UUIDIdGenerator, make_id_generator, new_id


class TestNewId:
    def test_unique(self):
        assert len({new_id() for _ in range(100)}) == 100


class TestCounterIdGenerator:
    def test_sequence(self):
        gen = CounterIdGenerator("t")
        assert [gen(), gen(), gen()] == ["t0", "t1", "t2"]

    def test_independent_generators(self):
        a = CounterIdGenerator()
        b = CounterIdGenerator()
        a()
        assert b() == "0"

    def test_thread_safe(self):
        gen = CounterIdGenerator()
        ids = []
        lock = threading.Lock()

        def worker():
            for _ in range(200):
                value = gen()
                with lock:
                    ids.append(value)

        threads = [threading.Thread(target=worker) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(set(ids)) == 800


class TestMakeIdGenerator:
    def test_counter(self):
        gen = make_id_generator("counter", prefix="n")
        assert isinstance(gen, CounterIdGenerator)
        assert gen() == "n0"

    def test_uuid(self):
        gen = make_id_generator("uuid", prefix="n")
        assert isinstance(gen, UUIDIdGenerator)
        assert gen().startswith("n")

    def test_unknown(self):
        with pytest.raises(ValueError):
            make_id_generator("sequential")
