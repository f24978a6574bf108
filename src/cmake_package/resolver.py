"""Recursive resolution of a target's properties into one JSON document."""

from .constants import GENERATOR_EXPRESSION, NOTFOUND_SUFFIX, PROPERTY_SET, SINGLE_VALUED_PROPERTIES
from .document import UnitDocument
from .errors import CyclicDependencyError, TargetNotFoundError
from .models import PropertyValue, Scalar, UnitReference
from .registry import TargetRepository


def is_generator_expression(value: str) -> bool:
    """Check whether a raw value is an unevaluated generator expression."""
    return GENERATOR_EXPRESSION.match(value) is not None


def is_unset(value: str) -> bool:
    """Check whether a raw value is empty or a CMake NOTFOUND marker."""
    return not value or value == "NOTFOUND" or value.endswith(NOTFOUND_SUFFIX)


class TargetResolver:
    """
    Walk a target and every target it references.

    Reading a property and resolving a target are mutually recursive: a
    property value naming another registered target is replaced by that
    target's fully resolved document. The only default cycle guard is that a
    target never recurses into itself. With `detect_cycles`, the chain of
    targets being resolved is tracked and a cycle through intermediaries
    raises CyclicDependencyError instead of recursing without bound.
    """

    def __init__(
        self,
        repository: TargetRepository,
        detect_cycles: bool = False,
        verbose: bool = False,
    ):
        self.repository = repository
        self.detect_cycles = detect_cycles
        self.verbose = verbose

    def resolve(self, target: str) -> UnitDocument:
        """
        Resolve the full property set of `target`.

        Raises:
            TargetNotFoundError: If `target` is not registered
            CyclicDependencyError: If cycle detection is on and a cycle exists
        """
        handle = self.repository.lookup(target)
        if handle is None:
            raise TargetNotFoundError(f"Target {target} not found")
        return self._resolve(handle, ())

    def read_property(
        self, target: str, prop: str, chain: tuple[str, ...] = ()
    ) -> list[PropertyValue]:
        """
        Read and classify the values of one property.

        Args:
            target: Handle of the target being read
            prop: Property name
            chain: Targets currently being resolved, outermost first

        Returns:
            Classified values in CMake's order; empty if the property is unset
        """
        raw_values = self.repository.get_property(target, prop)
        if self.verbose and raw_values:
            print(f"[resolve] {target}: {prop} = {';'.join(raw_values)}")

        values: list[PropertyValue] = []
        for raw in raw_values:
            if is_unset(raw):
                continue

            handle = self.repository.lookup(raw)
            if handle is not None and handle != target:
                values.append(UnitReference(handle, self._resolve(handle, chain)))
            elif is_generator_expression(raw):
                if self.verbose:
                    print(f"[resolve] {target}: ignoring generator expression {raw}")
            else:
                values.append(Scalar(raw))

        return values

    def _read_scalar(self, target: str, prop: str) -> str:
        raw_values = [
            raw
            for raw in self.repository.get_property(target, prop)
            if not is_unset(raw)
        ]
        kept = [raw for raw in raw_values if not is_generator_expression(raw)]
        if self.verbose and raw_values:
            print(f"[resolve] {target}: {prop} = {';'.join(raw_values)}")
            if len(kept) != len(raw_values):
                print(f"[resolve] {target}: ignoring generator expression in {prop}")
        return ";".join(kept)

    def _resolve(self, target: str, chain: tuple[str, ...]) -> UnitDocument:
        if self.detect_cycles and target in chain:
            raise CyclicDependencyError(chain[chain.index(target):] + (target,))
        chain = chain + (target,)

        document = UnitDocument()
        for prop in PROPERTY_SET:
            if prop in SINGLE_VALUED_PROPERTIES:
                value = self._read_scalar(target, prop)
                if value:
                    document.set_scalar(prop, value)
            else:
                values = self.read_property(target, prop, chain)
                if values:
                    document.set_array(prop, values)

        return document
