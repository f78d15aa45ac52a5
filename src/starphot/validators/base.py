from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Any, Optional

@dataclass
class ValidationError:
    msg: str
    context: Optional[dict[str, Any]] = None

    def __str__(self) -> str:
        if not self.context:
            return self.msg
        ctx = ", ".join(f"{k}={v}" for k, v in self.context.items())
        return f"{self.msg} ({ctx})"

@dataclass
class ValidationResult:
    ok: bool = True
    errors: List[ValidationError] = field(default_factory=list)

    def add(self, msg: str, **ctx: Any) -> None:
        self.ok = False
        self.errors.append(ValidationError(msg, ctx or None))

    def summary(self, n: int = 10) -> str:
        return "; ".join(cap_list([str(e) for e in self.errors], n))

def cap_list(xs: list[str], n: int = 10) -> list[str]:
    return xs[:n] + (["…"] if len(xs) > n else [])
