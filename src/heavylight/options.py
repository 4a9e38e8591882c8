from __future__ import annotations
from typing import Optional, Any

TIE_BREAKS: tuple[str, ...] = ("first", "lowest_id")

DEFAULTS: dict[str, Any] = {
    "tie_break": "first",  # which equal-sized child becomes the heavy child
    "validate": True,  # range-check node indices and verify the tree on build
}


class DecompositionOptions:
    """Dict-like bag of build options for a HeavyLightDecomposition

    Only the keys in DEFAULTS are accepted. Anything not given keeps its
    default value.
    """

    def __init__(self, opts: Optional[dict[str, Any]] = None):
        if opts is None:
            opts = {}
        self._options: dict[str, Any] = dict(DEFAULTS)
        self.update(opts)

    def __getitem__(self, key: str):
        return self._options[key]

    def __setitem__(self, key: str, value):
        self._check(key, value)
        self._options[key] = value

    def __contains__(self, key: str) -> bool:
        return key in self._options

    def __repr__(self):
        return f"<DecompositionOptions {self._options}>"

    def update(self, opts: dict[str, Any]):
        for key, value in opts.items():
            self._check(key, value)
        self._options.update(opts)

    def get(self, key, default=None) -> Any:
        return self._options.get(key, default)

    def keys(self):
        return self._options.keys()

    @staticmethod
    def _check(key: str, value):
        if key not in DEFAULTS:
            raise KeyError(f"Unknown decomposition option: {key!r}")
        if key == "tie_break" and value not in TIE_BREAKS:
            raise ValueError(
                f"tie_break must be one of {TIE_BREAKS}, got {value!r}"
            )
