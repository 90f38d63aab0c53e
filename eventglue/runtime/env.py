"""Environment bindings handed to handlers unchanged."""

import os
from collections.abc import Iterator, Mapping


class Env(Mapping[str, str]):
    """
    Read-only variables and secrets configured for a handler.

    Iterating or indexing an Env only sees plain variables; secrets are
    reachable through secret() and never appear in repr().
    """

    def __init__(
        self,
        variables: Mapping[str, str] | None = None,
        secrets: Mapping[str, str] | None = None,
    ) -> None:
        self._variables = dict(variables or {})
        self._secrets = dict(secrets or {})

    @classmethod
    def from_environ(
        cls,
        var_prefix: str = "WORKER_VAR_",
        secret_prefix: str = "WORKER_SECRET_",
        environ: Mapping[str, str] | None = None,
    ) -> "Env":
        """
        Collect prefixed process environment variables.

        Args:
            var_prefix: Prefix marking plain variables
            secret_prefix: Prefix marking secrets
            environ: Source mapping (default os.environ)

        Returns:
            Env with prefixes stripped from the names
        """
        environ = os.environ if environ is None else environ
        variables = {
            key[len(var_prefix):]: value
            for key, value in environ.items()
            if key.startswith(var_prefix)
        }
        secrets = {
            key[len(secret_prefix):]: value
            for key, value in environ.items()
            if key.startswith(secret_prefix)
        }
        return cls(variables, secrets)

    def var(self, name: str) -> str:
        try:
            return self._variables[name]
        except KeyError:
            raise KeyError(f"variable {name!r} is not bound") from None

    def secret(self, name: str) -> str:
        try:
            return self._secrets[name]
        except KeyError:
            raise KeyError(f"secret {name!r} is not bound") from None

    def __getitem__(self, name: str) -> str:
        return self._variables[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._variables)

    def __len__(self) -> int:
        return len(self._variables)

    def __repr__(self) -> str:
        return f"Env(variables={sorted(self._variables)}, secrets={len(self._secrets)})"
