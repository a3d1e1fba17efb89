from __future__ import annotations

import logging

import pytest

from decoding_qc.config import CheckParameters
from decoding_qc.thresholds import (
    FlatCheck,
    ThresholdVector,
    load_thresholds,
    parse_limit_list,
    thresholds_from_parameters,
)


def test_parse_limit_list_handles_whitespace_and_negative_entries() -> None:
    assert parse_limit_list(" 5, -1 ,3 ") == [5, -1, 3]
    assert parse_limit_list("") == []
    assert parse_limit_list("4;2", delimiter=";") == [4, 2]


@pytest.mark.parametrize("raw", ["5,,3", "5,x,3", "5,1.5,3"])
def test_parse_limit_list_rejects_bad_entries(raw: str) -> None:
    with pytest.raises(ValueError):
        parse_limit_list(raw)


def test_load_thresholds_returns_vector_for_matching_length() -> None:
    mode = load_thresholds("5,-1,3", 3)

    assert isinstance(mode, ThresholdVector)
    assert mode.limits == (5, -1, 3)
    assert mode.is_checked(0)
    assert not mode.is_checked(1)


def test_load_thresholds_falls_back_to_flat_check_on_length_mismatch(caplog) -> None:
    with caplog.at_level(logging.ERROR, logger="decoding_qc.thresholds"):
        mode = load_thresholds("5,3", 3, flat_ceiling=150)

    assert isinstance(mode, FlatCheck)
    assert mode.ceiling == 150
    assert mode.reason == "length_mismatch"
    assert "Incorrect vector with decoding error limits" in caplog.text


def test_load_thresholds_treats_missing_and_unparseable_input_as_config_error(caplog) -> None:
    with caplog.at_level(logging.ERROR, logger="decoding_qc.thresholds"):
        missing = load_thresholds("", 3)
        garbled = load_thresholds("5,abc,3", 3)

    assert isinstance(missing, FlatCheck)
    assert isinstance(garbled, FlatCheck)
    assert garbled.reason == "unparseable"
    assert len([r for r in caplog.records if r.levelno == logging.ERROR]) == 2


def test_load_thresholds_flat_override_skips_vector_without_error(caplog) -> None:
    with caplog.at_level(logging.INFO, logger="decoding_qc.thresholds"):
        mode = load_thresholds("5,-1,3", 3, flat_check=True, flat_scan_last_bin=True)

    assert isinstance(mode, FlatCheck)
    assert mode.reason == "requested"
    assert mode.scan_last_bin
    assert not [r for r in caplog.records if r.levelno >= logging.ERROR]


def test_flat_check_scan_range_excludes_last_bin_by_default() -> None:
    assert list(FlatCheck().scan_range(3)) == [0, 1]
    assert list(FlatCheck(scan_last_bin=True).scan_range(3)) == [0, 1, 2]
    assert list(FlatCheck().scan_range(0)) == []


def test_thresholds_from_parameters_reads_host_bag_keys() -> None:
    params = CheckParameters.from_custom_parameters(
        {
            "DecLinkErrorLimits": "1|2|3",
            "delimiter": "|",
            "doFlatCheck": "false",
            "unrelatedKey": "ignored",
        }
    )
    mode = thresholds_from_parameters(params, 3)

    assert isinstance(mode, ThresholdVector)
    assert mode.limits == (1, 2, 3)
