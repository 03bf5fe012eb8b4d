import sys

from rich.pretty import pprint

from arghelper import *

definition = ScriptDefinition(
    [
        Argument("firstArg", "first argument", short_name="f"),
        Argument(
            "env",
            "the environment to do the thing for. Must be either `dev` or `prod`",
            short_name="e",
            validator=lambda value: str(value).lower() in ("dev", "prod"),
            message=lambda value: f"{value} is not either `dev` or `prod`",
        ),
        Argument("dryRun", "only print what would be done", required=False),
    ],
    "This script does the thing",
    any_arg_required=True,
)


if __name__ == '__main__':
    pprint(validate_args(sys.argv[1:], definition, parse_options=ParseOptions(boolean=["dryRun"])))
