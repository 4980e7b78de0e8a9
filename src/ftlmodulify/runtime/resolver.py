"""Fluent pattern resolver - converts AST patterns to formatted strings.

Resolves patterns by walking the AST, interpolating variables and
evaluating selectors. Python 3.13+. Indirect dependency: Babel (via
plural_rules and functions).

Each top-level call gets its own ResolutionContext, so one resolver may be
used from several threads at once.
"""

from collections.abc import Iterator, Mapping, Sequence
from contextlib import contextmanager
from dataclasses import dataclass, field
from decimal import Decimal

from ftlmodulify.constants import (
    FALLBACK_FUNCTION_ERROR,
    FALLBACK_MISSING_MESSAGE,
    FALLBACK_MISSING_TERM,
    FALLBACK_MISSING_VARIABLE,
    MAX_DEPTH,
    TERM_PREFIX,
)
from ftlmodulify.diagnostics import (
    ErrorTemplate,
    FluentCyclicReferenceError,
    FluentError,
    FluentReferenceError,
    FluentResolutionError,
)
from ftlmodulify.syntax import (
    Expression,
    FunctionReference,
    Identifier,
    Message,
    MessageReference,
    NumberLiteral,
    Pattern,
    Placeable,
    SelectExpression,
    StringLiteral,
    Term,
    TermReference,
    TextElement,
    VariableReference,
    Variant,
)

from .functions import FluentNumber, FluentValue, FunctionRegistry
from .plural_rules import select_plural_category

__all__ = ["FluentResolver", "ResolutionContext"]

# Unicode bidirectional isolation characters per Unicode TR9.
UNICODE_FSI: str = "\u2068"  # U+2068 FIRST STRONG ISOLATE
UNICODE_PDI: str = "\u2069"  # U+2069 POP DIRECTIONAL ISOLATE


@dataclass(slots=True)
class ResolutionContext:
    """Messages and terms on the current resolution path.

    Attributes:
        path: Keys entered so far, outermost first
        max_depth: Longest path allowed before resolution gives up
    """

    path: list[str] = field(default_factory=list)
    max_depth: int = MAX_DEPTH

    def cycle_through(self, key: str) -> list[str] | None:
        """Return the cyclic path if ``key`` is already being resolved."""
        if key in self.path:
            return [*self.path, key]
        return None

    @property
    def at_limit(self) -> bool:
        return len(self.path) >= self.max_depth

    @contextmanager
    def entering(self, key: str) -> Iterator[None]:
        self.path.append(key)
        try:
            yield
        finally:
            self.path.pop()


def _numeric_value(value: FluentValue) -> int | float | Decimal | None:
    match value:
        case FluentNumber(value=number):
            return number
        case bool():
            return None
        case int() | float() | Decimal():
            return value
        case _:
            return None


class FluentResolver:
    """Formats messages of one locale.

    Content problems never raise out of the public methods. Each one leaves
    a readable placeholder such as ``{$name}`` in the output and an error in
    the returned tuple.
    """

    __slots__ = (
        "function_registry",
        "locale",
        "messages",
        "terms",
        "use_isolating",
    )

    def __init__(
        self,
        locale: str,
        messages: Mapping[str, Message],
        terms: Mapping[str, Term],
        *,
        function_registry: FunctionRegistry,
        use_isolating: bool = False,
    ) -> None:
        """Initialize resolver.

        Args:
            locale: Locale code for plural selection and NUMBER
            messages: Messages by id
            terms: Terms by id (without the ``-`` prefix)
            function_registry: Functions callable from FTL (keyword-only)
            use_isolating: Wrap interpolated values in Unicode bidi marks (keyword-only)
        """
        self.locale = locale
        self.use_isolating = use_isolating
        self.messages = messages
        self.terms = terms
        self.function_registry = function_registry

    def resolve_pattern(
        self,
        pattern: Pattern,
        args: Mapping[str, FluentValue] | None = None,
    ) -> tuple[str, tuple[FluentError, ...]]:
        """Resolve a pattern to its final string, collecting errors.

        Never raises for content problems: missing variables, references and
        failing functions leave a readable fallback and an error entry.
        """
        errors: list[FluentError] = []
        result = self._resolve_pattern(pattern, args or {}, errors, ResolutionContext())
        return result, tuple(errors)

    def resolve_message(
        self,
        message: Message,
        args: Mapping[str, FluentValue] | None = None,
        attribute: str | None = None,
        *,
        context: ResolutionContext | None = None,
    ) -> tuple[str, tuple[FluentError, ...]]:
        """Resolve a message value or one of its attributes.

        Returns:
            Tuple of (formatted_string, errors)
        """
        errors: list[FluentError] = []
        args = args or {}
        if context is None:
            context = ResolutionContext()

        if attribute:
            attr = next((a for a in message.attributes if a.id.name == attribute), None)
            if attr is None:
                errors.append(
                    FluentReferenceError(
                        ErrorTemplate.attribute_not_found(attribute, message.id.name)
                    )
                )
                return (f"{{{message.id.name}.{attribute}}}", tuple(errors))
            pattern = attr.value
        else:
            if message.value is None:
                errors.append(
                    FluentReferenceError(ErrorTemplate.message_no_value(message.id.name))
                )
                return (FALLBACK_MISSING_MESSAGE.format(id=message.id.name), tuple(errors))
            pattern = message.value

        msg_key = f"{message.id.name}.{attribute}" if attribute else message.id.name
        result = self._resolve_entry_pattern(msg_key, pattern, args, errors, context)
        return (result, tuple(errors))

    def _resolve_entry_pattern(
        self,
        key: str,
        pattern: Pattern,
        args: Mapping[str, FluentValue],
        errors: list[FluentError],
        context: ResolutionContext,
    ) -> str:
        """Resolve a referenced pattern under cycle and depth checks."""
        cycle = context.cycle_through(key)
        if cycle is not None:
            errors.append(FluentCyclicReferenceError(ErrorTemplate.cyclic_reference(cycle)))
            return f"{{{key}}}"

        if context.at_limit:
            errors.append(
                FluentReferenceError(ErrorTemplate.max_depth_exceeded(key, context.max_depth))
            )
            return f"{{{key}}}"

        with context.entering(key):
            return self._resolve_pattern(pattern, args, errors, context)

    def _resolve_pattern(
        self,
        pattern: Pattern,
        args: Mapping[str, FluentValue],
        errors: list[FluentError],
        context: ResolutionContext,
    ) -> str:
        parts: list[str] = []

        for element in pattern.elements:
            match element:
                case TextElement(value=value):
                    parts.append(value)
                case Placeable(expression=expression):
                    try:
                        value = self._resolve_expression(expression, args, errors, context)
                    except (FluentReferenceError, FluentResolutionError) as e:
                        errors.append(e)
                        parts.append(self._get_fallback_for_placeable(expression))
                        continue
                    formatted = self._format_value(value)
                    if self.use_isolating and not isinstance(expression, SelectExpression):
                        formatted = f"{UNICODE_FSI}{formatted}{UNICODE_PDI}"
                    parts.append(formatted)

        return "".join(parts)

    def _resolve_expression(  # noqa: PLR0911
        self,
        expr: Expression,
        args: Mapping[str, FluentValue],
        errors: list[FluentError],
        context: ResolutionContext,
    ) -> FluentValue:
        match expr:
            case SelectExpression():
                return self._resolve_select_expression(expr, args, errors, context)
            case VariableReference():
                return self._resolve_variable_reference(expr, args)
            case MessageReference():
                return self._resolve_message_reference(expr, args, errors, context)
            case TermReference():
                return self._resolve_term_reference(expr, args, errors, context)
            case FunctionReference():
                return self._resolve_function_call(expr, args, errors, context)
            case StringLiteral(value=value):
                return value
            case NumberLiteral(value=value):
                return value
            case Placeable(expression=inner):
                return self._resolve_expression(inner, args, errors, context)

    def _resolve_variable_reference(
        self, expr: VariableReference, args: Mapping[str, FluentValue]
    ) -> FluentValue:
        var_name = expr.id.name
        if var_name not in args:
            raise FluentReferenceError(ErrorTemplate.variable_not_provided(var_name))
        return args[var_name]

    def _resolve_message_reference(
        self,
        expr: MessageReference,
        args: Mapping[str, FluentValue],
        errors: list[FluentError],
        context: ResolutionContext,
    ) -> str:
        msg_id = expr.id.name
        message = self.messages.get(msg_id)
        if message is None:
            raise FluentReferenceError(ErrorTemplate.message_not_found(msg_id))
        result, nested_errors = self.resolve_message(
            message,
            args,
            attribute=expr.attribute.name if expr.attribute else None,
            context=context,
        )
        errors.extend(nested_errors)
        return result

    def _resolve_term_reference(
        self,
        expr: TermReference,
        args: Mapping[str, FluentValue],
        errors: list[FluentError],
        context: ResolutionContext,
    ) -> str:
        """Resolve term reference.

        Terms never see the caller's variables; they only receive the
        arguments written at the reference site, e.g. ``{ -brand(case: "gen") }``.
        """
        term_id = expr.id.name
        term = self.terms.get(term_id)
        if term is None:
            raise FluentReferenceError(ErrorTemplate.term_not_found(term_id))

        if expr.attribute:
            attr = next((a for a in term.attributes if a.id.name == expr.attribute.name), None)
            if attr is None:
                raise FluentReferenceError(
                    ErrorTemplate.term_attribute_not_found(expr.attribute.name, term_id)
                )
            pattern = attr.value
            term_key = f"{TERM_PREFIX}{term_id}.{expr.attribute.name}"
        else:
            pattern = term.value
            term_key = f"{TERM_PREFIX}{term_id}"

        term_args: dict[str, FluentValue] = {}
        if expr.arguments is not None:
            term_args = {
                arg.name.name: self._resolve_expression(arg.value, args, errors, context)
                for arg in expr.arguments.named
            }

        return self._resolve_entry_pattern(term_key, pattern, term_args, errors, context)

    def _find_exact_variant(
        self,
        variants: Sequence[Variant],
        selector_number: int | float | Decimal | None,
        selector_str: str,
    ) -> Variant | None:
        """Pass 1: variant with an exact identifier or number match."""
        for variant in variants:
            match variant.key:
                case Identifier(name=key_name):
                    if key_name == selector_str:
                        return variant
                case NumberLiteral(value=key_value):
                    if selector_number is not None and key_value == selector_number:
                        return variant
        return None

    def _find_plural_variant(
        self, variants: Sequence[Variant], plural_category: str
    ) -> Variant | None:
        """Pass 2: variant named after the CLDR plural category."""
        for variant in variants:
            match variant.key:
                case Identifier(name=key_name) if key_name == plural_category:
                    return variant
        return None

    def _find_default_variant(self, variants: Sequence[Variant]) -> Variant | None:
        for variant in variants:
            if variant.default:
                return variant
        return None

    def _resolve_select_expression(
        self,
        expr: SelectExpression,
        args: Mapping[str, FluentValue],
        errors: list[FluentError],
        context: ResolutionContext,
    ) -> str:
        """Resolve select expression by matching a variant.

        Matching priority:
            1. Exact identifier or number match
            2. Plural category match for numeric selectors
            3. Default variant

        A selector that fails to resolve records its error and selects the
        default variant.
        """
        try:
            selector_value = self._resolve_expression(expr.selector, args, errors, context)
        except (FluentReferenceError, FluentResolutionError) as e:
            errors.append(e)
            selector_value = None

        selector_number = _numeric_value(selector_value)
        selector_str = "" if selector_value is None else self._format_value(selector_value)

        variant = self._find_exact_variant(expr.variants, selector_number, selector_str)

        if variant is None and selector_number is not None:
            plural_category = select_plural_category(selector_number, self.locale)
            variant = self._find_plural_variant(expr.variants, plural_category)

        if variant is None:
            variant = self._find_default_variant(expr.variants)

        if variant is None:
            raise FluentResolutionError(ErrorTemplate.no_variants())

        return self._resolve_pattern(variant.value, args, errors, context)

    def _resolve_function_call(
        self,
        func_ref: FunctionReference,
        args: Mapping[str, FluentValue],
        errors: list[FluentError],
        context: ResolutionContext,
    ) -> FluentValue:
        positional_values: list[FluentValue] = [
            self._resolve_expression(arg, args, errors, context)
            for arg in func_ref.arguments.positional
        ]
        named_values: dict[str, FluentValue] = {
            arg.name.name: self._resolve_expression(arg.value, args, errors, context)
            for arg in func_ref.arguments.named
        }
        return self.function_registry.call(
            func_ref.id.name, positional_values, named_values, self.locale
        )

    def _format_value(self, value: FluentValue) -> str:
        """Format a resolved value for output.

        bool renders as "true"/"false" (Fluent convention), None as "".
        """
        if isinstance(value, str):
            return value
        if isinstance(value, bool):
            return "true" if value else "false"
        if value is None:
            return ""
        return str(value)

    def _get_fallback_for_placeable(self, expr: Expression) -> str:
        """Readable fallback for a placeable that failed to resolve.

        Examples:
            VariableReference($name) -> "{$name}"
            MessageReference(welcome) -> "{welcome}"
            TermReference(-brand) -> "{-brand}"
            FunctionReference(NUMBER) -> "{NUMBER()}"
        """
        match expr:
            case VariableReference(id=identifier):
                return FALLBACK_MISSING_VARIABLE.format(name=identifier.name)
            case MessageReference(id=identifier, attribute=attribute):
                suffix = f".{attribute.name}" if attribute else ""
                return FALLBACK_MISSING_MESSAGE.format(id=identifier.name + suffix)
            case TermReference(id=identifier, attribute=attribute):
                suffix = f".{attribute.name}" if attribute else ""
                return FALLBACK_MISSING_TERM.format(name=identifier.name + suffix)
            case FunctionReference(id=identifier):
                return FALLBACK_FUNCTION_ERROR.format(name=identifier.name)
            case SelectExpression(selector=selector):
                return self._get_fallback_for_placeable(selector)
            case Placeable(expression=inner):
                return self._get_fallback_for_placeable(inner)
            case _:
                return "{???}"
