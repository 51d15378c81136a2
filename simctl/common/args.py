"""Parsing of CLI-style ``k=v;k2=v2`` attribute lists."""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional


def parse_map_args(args_list: Optional[Iterable[str]]) -> List[Dict[str, str]]:
    """Turn each ``"k=v;k2=v2"`` string into one map.

    ``-r "cpu=2;memory=4Gi" -r "cpu=4;memory=8Gi;nvidia.com/gpu=1"`` yields
    ``[{"cpu": "2", "memory": "4Gi"}, {"cpu": "4", "memory": "8Gi", "nvidia.com/gpu": "1"}]``.

    Tokens that do not contain exactly one ``=`` are dropped, and a string
    without a single valid token contributes no entry at all.
    """

    parsed: List[Dict[str, str]] = []
    for value in args_list or []:
        entry: Dict[str, str] = {}
        for token in value.split(";"):
            if token.count("=") != 1:
                continue
            key, _, item = token.partition("=")
            entry[key] = item
        if entry:
            parsed.append(entry)
    return parsed


def split_csv(values: Optional[Iterable[str]]) -> List[str]:
    """Flatten repeated options that may also carry comma separated values."""

    flattened: List[str] = []
    for value in values or []:
        flattened.extend(part for part in value.split(",") if part)
    return flattened


__all__ = ["parse_map_args", "split_csv"]
