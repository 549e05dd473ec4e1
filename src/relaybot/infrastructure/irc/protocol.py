"""IRC line parsing and formatting.

Only the subset of RFC 1459 framing the bot needs: an optional prefix,
a command and parameters with an optional trailing parameter.
"""

from dataclasses import dataclass, field

# CTCP messages are wrapped in \x01 ... \x01
CTCP_DELIMITER = "\x01"


@dataclass(frozen=True)
class IRCLine:
    """A parsed IRC protocol line.

    Attributes:
        command: Command or numeric reply, upper-cased (e.g. "PRIVMSG", "001").
        params: Parameters, the trailing parameter last.
        prefix: Source prefix without the leading colon, if any.
        tags: Raw IRCv3 message tags, if any.
    """

    command: str
    params: list[str] = field(default_factory=list)
    prefix: str | None = None
    tags: str | None = None

    @property
    def nick(self) -> str:
        """Nick part of the prefix ("nick!user@host" -> "nick")."""
        if not self.prefix:
            return ""
        return self.prefix.split("!", 1)[0].split("@", 1)[0]

    @property
    def trailing(self) -> str:
        """Last parameter, or an empty string."""
        return self.params[-1] if self.params else ""


def parse_line(raw: str) -> IRCLine:
    """Parse one IRC line.

    Args:
        raw: Line without or with the trailing CRLF.

    Returns:
        Parsed IRCLine.

    Raises:
        ValueError: If the line has no command.
    """
    line = raw.rstrip("\r\n")

    tags: str | None = None
    if line.startswith("@"):
        tags, _, line = line[1:].partition(" ")
        line = line.lstrip(" ")

    prefix: str | None = None
    if line.startswith(":"):
        prefix, _, line = line[1:].partition(" ")
        line = line.lstrip(" ")

    trailing: str | None = None
    if " :" in line:
        line, _, trailing = line.partition(" :")
    elif line.startswith(":"):
        trailing = line[1:]
        line = ""

    parts = line.split()
    if not parts:
        raise ValueError(f"IRC line has no command: {raw!r}")

    command, params = parts[0].upper(), parts[1:]
    if trailing is not None:
        params.append(trailing)

    return IRCLine(command=command, params=params, prefix=prefix, tags=tags)


def _strip_line_breaks(value: str) -> str:
    return value.replace("\r", " ").replace("\n", " ")


def format_command(command: str, *params: str) -> str:
    """Format a command line (without CRLF).

    The last parameter is sent as a trailing parameter when it is empty,
    contains spaces or starts with a colon. Line breaks inside parameters
    are replaced with spaces so one call never produces two lines.

    Args:
        command: IRC command.
        *params: Command parameters.

    Returns:
        Formatted line.
    """
    if not params:
        return command

    *middle, last = (_strip_line_breaks(p) for p in params)
    if not last or " " in last or last.startswith(":"):
        last = f":{last}"
    return " ".join([command, *middle, last])


def is_ctcp(text: str) -> bool:
    """Check if a PRIVMSG body is a CTCP request."""
    return text.startswith(CTCP_DELIMITER)
