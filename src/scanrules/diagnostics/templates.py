"""Error message templates.

Centralized error message templates for testable, consistent error messages.
Python 3.13+. Zero external dependencies.
"""

from .codes import Diagnostic, DiagnosticCode


class ErrorTemplate:
    """Centralized error message templates.

    All error messages are created here. NO f-strings in exception constructors!
    This solves EM101/EM102 violations while providing:
        - Testable error messages
        - Consistent formatting
        - Documentation of all error cases
    """

    # ------------------------------------------------------------------
    # Scan errors
    # ------------------------------------------------------------------

    @staticmethod
    def literal_mismatch(offset: int) -> Diagnostic:
        """Input did not match a literal term.

        Args:
            offset: Offset of the first disagreeing token in the input

        Returns:
            Diagnostic for LITERAL_MISMATCH
        """
        return Diagnostic(
            code=DiagnosticCode.LITERAL_MISMATCH,
            message="did not match literal",
            offset=offset,
            hint="Check the literal text and the active comparison policy",
        )

    @staticmethod
    def syntax(offset: int, description: str | None) -> Diagnostic:
        """A scanner rejected its input.

        Args:
            offset: Offset at which the scanner was started
            description: Static description of the problem, or None

        Returns:
            Diagnostic for SYNTAX or SYNTAX_NO_MESSAGE
        """
        if description is None:
            return Diagnostic(
                code=DiagnosticCode.SYNTAX_NO_MESSAGE,
                message="unknown syntax error",
                offset=offset,
            )
        return Diagnostic(
            code=DiagnosticCode.SYNTAX,
            message=f"syntax error: {description}",
            offset=offset,
        )

    @staticmethod
    def expected_end(offset: int) -> Diagnostic:
        """Trailing input remained after a rule completed.

        Args:
            offset: Offset of the first unconsumed non-space character

        Returns:
            Diagnostic for EXPECTED_END
        """
        return Diagnostic(
            code=DiagnosticCode.EXPECTED_END,
            message="expected end of input",
            offset=offset,
            hint="Add a remainder() term to capture trailing input",
        )

    @staticmethod
    def io(error: BaseException) -> Diagnostic:
        """Reading the input failed.

        Args:
            error: The underlying I/O exception

        Returns:
            Diagnostic for IO
        """
        return Diagnostic(
            code=DiagnosticCode.IO,
            message=f"io error: {error}",
            offset=0,
        )

    @staticmethod
    def other(offset: int, error: BaseException) -> Diagnostic:
        """Wrap an external error raised while scanning.

        Args:
            offset: Offset at which the scanner was started
            error: The wrapped exception

        Returns:
            Diagnostic for OTHER
        """
        return Diagnostic(
            code=DiagnosticCode.OTHER,
            message=str(error) or type(error).__name__,
            offset=offset,
        )

    # ------------------------------------------------------------------
    # Pattern errors
    # ------------------------------------------------------------------

    @staticmethod
    def repeat_bounds_invalid(min_count: int, max_count: int | None) -> Diagnostic:
        """Repetition built with min greater than max, or a negative bound.

        Args:
            min_count: Requested minimum
            max_count: Requested maximum (None for unbounded)

        Returns:
            Diagnostic for REPEAT_BOUNDS_INVALID
        """
        if max_count is not None and min_count > max_count:
            message = f"repetition bounds invalid: min {min_count} > max {max_count}"
        else:
            message = f"repetition bounds invalid: min {min_count}, max {max_count}"
        return Diagnostic(
            code=DiagnosticCode.REPEAT_BOUNDS_INVALID,
            message=message,
            hint="Use 0 <= min <= max, or max=None for an unbounded repetition",
        )

    @staticmethod
    def literal_no_tokens(literal: str) -> Diagnostic:
        """Literal consists only of whitespace.

        Args:
            literal: The offending literal

        Returns:
            Diagnostic for LITERAL_NO_TOKENS
        """
        return Diagnostic(
            code=DiagnosticCode.LITERAL_NO_TOKENS,
            message=f"literal {literal!r} contains no comparable tokens",
            hint="Use a whitespace policy or a Space scanner to match whitespace",
        )

    @staticmethod
    def no_rules() -> Diagnostic:
        """Alternation built with no rules.

        Returns:
            Diagnostic for NO_RULES
        """
        return Diagnostic(
            code=DiagnosticCode.NO_RULES,
            message="at least one rule is required",
        )

    @staticmethod
    def tail_not_last(term: str) -> Diagnostic:
        """Tail capture placed before other terms.

        Args:
            term: Description of the tail term

        Returns:
            Diagnostic for TAIL_NOT_LAST
        """
        return Diagnostic(
            code=DiagnosticCode.TAIL_NOT_LAST,
            message=f"{term} must be the last term of a rule",
        )

    @staticmethod
    def not_a_scanner(target: object) -> Diagnostic:
        """Capture target cannot be resolved to a scanner.

        Args:
            target: The object passed as a capture target

        Returns:
            Diagnostic for NOT_A_SCANNER
        """
        name = getattr(target, "__qualname__", None) or type(target).__qualname__
        return Diagnostic(
            code=DiagnosticCode.NOT_A_SCANNER,
            message=f"no scanner registered for {name}",
            hint="Pass a scanner, subclass ScanSelfFromStr, or call register_scanner()",
        )

    @staticmethod
    def width_invalid(width: int) -> Diagnostic:
        """Width-bounding scanner built with a negative width.

        Args:
            width: The requested width

        Returns:
            Diagnostic for WIDTH_INVALID
        """
        return Diagnostic(
            code=DiagnosticCode.WIDTH_INVALID,
            message=f"width must be non-negative, got {width}",
        )

    @staticmethod
    def locale_unknown(locale_code: str) -> Diagnostic:
        """Locale code not recognized by Babel.

        Args:
            locale_code: The locale identifier

        Returns:
            Diagnostic for LOCALE_UNKNOWN
        """
        return Diagnostic(
            code=DiagnosticCode.LOCALE_UNKNOWN,
            message=f"Unknown locale identifier '{locale_code}'",
            hint="Use a CLDR locale identifier such as 'en_US' or 'de_DE'",
        )

    @staticmethod
    def capture_duplicate(name: str) -> Diagnostic:
        """Two captures in one rule share a name.

        Args:
            name: The duplicated capture name

        Returns:
            Diagnostic for CAPTURE_DUPLICATE
        """
        return Diagnostic(
            code=DiagnosticCode.CAPTURE_DUPLICATE,
            message=f"capture name '{name}' is bound more than once",
        )

    # ------------------------------------------------------------------
    # Limit errors
    # ------------------------------------------------------------------

    @staticmethod
    def max_depth_exceeded(max_depth: int) -> Diagnostic:
        """Grammar nesting exceeded the configured depth.

        Args:
            max_depth: Maximum allowed depth

        Returns:
            Diagnostic for MAX_DEPTH_EXCEEDED
        """
        return Diagnostic(
            code=DiagnosticCode.MAX_DEPTH_EXCEEDED,
            message=f"Maximum grammar nesting depth ({max_depth}) exceeded",
            hint="Input is nested too deeply or a grammar refers to itself without consuming",
        )

    @staticmethod
    def input_too_large(size: int, max_size: int) -> Diagnostic:
        """Top-level input exceeds the configured size.

        Args:
            size: Input length in characters
            max_size: Maximum allowed length

        Returns:
            Diagnostic for INPUT_TOO_LARGE
        """
        return Diagnostic(
            code=DiagnosticCode.INPUT_TOO_LARGE,
            message=f"Input exceeds maximum size: {size:,} characters (max: {max_size:,})",
            hint="Split the input or raise max_input_size",
        )
