# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Tests for the dimension pre-scan.

The maxima are cumulative across readers, do not depend on batch size, and
every reader is left rewound.
"""

import threading
from pathlib import Path

import pytest

from sparsefm.data.parser import LibFFMParser, LibSVMParser
from sparsefm.data.reader import InMemoryReader, OnDiskReader
from sparsefm.solver.interfaces import Parser, Reader
from sparsefm.solver.prescan import Dimensions, ScanInterrupted, scan_dimensions


def _reader(path: Path, batch_size: int, parser: Parser, on_disk: bool = False) -> Reader:
    reader: Reader = OnDiskReader() if on_disk else InMemoryReader()
    reader.initialize(path, batch_size, parser)
    return reader


class TestScanDimensions:
    @pytest.mark.parametrize("batch_size", [1, 2, 4, 100])
    @pytest.mark.parametrize("on_disk", [False, True])
    def test_maxima_are_global_across_readers(
        self, libsvm_train: Path, libsvm_test: Path, batch_size: int, on_disk: bool
    ) -> None:
        parser = LibSVMParser()
        readers = [
            _reader(libsvm_train, batch_size, parser, on_disk),
            _reader(libsvm_test, batch_size, parser, on_disk),
        ]
        assert scan_dimensions(readers, field_aware=False) == Dimensions(max_feature=9)

    def test_order_of_readers_does_not_matter(self, libsvm_train: Path, libsvm_test: Path) -> None:
        parser = LibSVMParser()
        readers = [_reader(libsvm_test, 3, parser), _reader(libsvm_train, 3, parser)]
        assert scan_dimensions(readers, field_aware=False).max_feature == 9

    def test_rescan_after_rewind_is_identical(self, libffm_train: Path) -> None:
        readers = [_reader(libffm_train, 3, LibFFMParser(), on_disk=True)]
        first = scan_dimensions(readers, field_aware=True)
        second = scan_dimensions(readers, field_aware=True)
        assert first == second == Dimensions(max_feature=7, max_field=3)

    def test_readers_are_rewound(self, libsvm_train: Path) -> None:
        reader = _reader(libsvm_train, 4, LibSVMParser())
        expected = reader.samples().rows
        reader.reset()

        scan_dimensions([reader], field_aware=False)

        assert reader.samples().rows == expected

    def test_fields_ignored_unless_field_aware(self, libffm_train: Path) -> None:
        readers = [_reader(libffm_train, 2, LibFFMParser())]
        assert scan_dimensions(readers, field_aware=False) == Dimensions(max_feature=7)

    def test_no_readers(self) -> None:
        assert scan_dimensions([], field_aware=True) == Dimensions()

    def test_stop_event_interrupts_and_rewinds(self, libsvm_train: Path) -> None:
        reader = _reader(libsvm_train, 2, LibSVMParser())
        stop = threading.Event()
        stop.set()

        with pytest.raises(ScanInterrupted):
            scan_dimensions([reader], field_aware=False, stop=stop)
        assert len(reader.samples()) == 2
