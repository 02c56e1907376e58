"""Slash command schema.

Declares each command, its description and its ordered options. The platform
adapter uses it to type raw arguments and to publish the command menu; the
router relies on the option order declared here.
"""

from pydantic import BaseModel, ConfigDict

from ..models import OptionType


class OptionSpec(BaseModel):
    """Declared option of a command."""

    model_config = ConfigDict(frozen=True)

    name: str
    type: OptionType
    description: str
    choices: tuple[str, ...] = ()


class CommandSpec(BaseModel):
    """Declared command with its ordered options."""

    model_config = ConfigDict(frozen=True)

    name: str
    description: str
    options: tuple[OptionSpec, ...] = ()

    @property
    def usage(self) -> str:
        """Invocation syntax, listing the allowed values of choice options.

        Example: '/price <b/t|a/t> <amount>'.
        """
        parts = [f"/{self.name}"]
        for option in self.options:
            placeholder = "|".join(option.choices) if option.choices else option.name
            parts.append(f"<{placeholder}>")
        return " ".join(parts)


_CURRENCY_OPTION = OptionSpec(
    name="currency",
    type=OptionType.STRING,
    description="Currency to convert from (GBP or USD)",
    choices=("GBP", "USD"),
)

COMMANDS: tuple[CommandSpec, ...] = (
    CommandSpec(
        name="price",
        description="Calculate the price in GBP and USD for a given amount of Robux",
        options=(
            OptionSpec(
                name="type",
                type=OptionType.STRING,
                description="Conversion type (b/t or a/t)",
                choices=("b/t", "a/t"),
            ),
            OptionSpec(name="amount", type=OptionType.INTEGER, description="Amount of Robux"),
        ),
    ),
    CommandSpec(
        name="convert",
        description="Convert between GBP and USD",
        options=(
            _CURRENCY_OPTION,
            OptionSpec(name="amount", type=OptionType.NUMBER, description="Amount to convert"),
        ),
    ),
    CommandSpec(
        name="robux",
        description="Convert GBP or USD to the amount of Robux",
        options=(
            _CURRENCY_OPTION,
            OptionSpec(name="amount", type=OptionType.NUMBER, description="Amount to convert"),
        ),
    ),
    CommandSpec(name="help", description="Display the available commands and their usage"),
)

COMMANDS_BY_NAME: dict[str, CommandSpec] = {command.name: command for command in COMMANDS}
