"""
Console harness for the Form Engine

Prompts for every field in section order, then submits. Repeats until
the submission is accepted or the user types 'quit'.
"""

import logging
import os
import sys
from datetime import datetime

from form_engine.commands import (
    ChoosePhoto, EditComment, EditDateTime, EditInteger, EditText,
    SelectOption, Submit,
)
from form_engine.core.form_engine import mounted_form
from form_engine.core.spec_loader import DEFAULT_FORM_SPEC_PATH, load_form_spec
from form_engine.utils.field_types import FieldType

# Configure logging
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "WARNING"),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

EXIT_COMMANDS = {"quit", "exit", "stop"}


class QuitRequested(Exception):
    pass


def print_separator(char="=", length=60):
    """Print a separator line"""
    print(char * length)


def ask(prompt):
    answer = input(prompt).strip()
    if answer.lower() in EXIT_COMMANDS:
        raise QuitRequested()
    return answer


def prompt_field(form, descriptor):
    """Ask for one field's value(s) and send the matching events"""
    marker = " *" if descriptor.required else ""
    print(f"\n{descriptor.title}{marker}")
    if descriptor.help_text:
        print(f"  ({descriptor.help_text})")

    field_type = descriptor.field_type

    if field_type == FieldType.TEXT:
        answer = ask("  > ")
        if answer:
            form.handle(EditText(descriptor.id, answer))

    elif field_type == FieldType.INTEGER:
        answer = ask("  number > ")
        if answer:
            form.handle(EditInteger(descriptor.id, answer))

    elif field_type == FieldType.SELECT:
        options = list(descriptor.options.items())
        for number, (_, label) in enumerate(options, start=1):
            print(f"  {number}. {label}")
        answer = ask("  choice > ")
        if answer.isdigit() and 1 <= int(answer) <= len(options):
            form.handle(SelectOption(descriptor.id, options[int(answer) - 1][0]))
        elif answer:
            print("  Not an option, skipped")

    elif field_type == FieldType.DATETIME:
        answer = ask("  YYYY-MM-DD HH:MM > ")
        if answer:
            try:
                moment = datetime.strptime(answer, "%Y-%m-%d %H:%M")
            except ValueError:
                print("  Not a date-time, skipped")
            else:
                form.handle(EditDateTime(descriptor.id, moment))

    if descriptor.shows_photo:
        answer = ask("  photo filename > ")
        if answer:
            form.handle(ChoosePhoto(descriptor.id, answer, "image/jpeg"))

    if descriptor.comment_enabled:
        answer = ask("  comment > ")
        if answer:
            form.handle(EditComment(descriptor.id, answer))


def main():
    """Run console form"""
    spec_path = sys.argv[1] if len(sys.argv) > 1 else os.getenv("FORM_SPEC_PATH", DEFAULT_FORM_SPEC_PATH)

    try:
        descriptors = load_form_spec(spec_path)
    except (FileNotFoundError, ValueError) as e:
        print(f"Could not load form spec: {e}")
        return 1

    print_separator()
    print("FORM GENERATOR - CONSOLE")
    print_separator()
    print("Leave a field blank to skip it. Type 'quit' to exit.")

    with mounted_form(descriptors) as form:
        try:
            while True:
                for category, fields in form.groups.items():
                    print()
                    print_separator("-")
                    print(category)
                    print_separator("-")
                    for descriptor in fields:
                        prompt_field(form, descriptor)

                result = form.handle(Submit()).submit_result
                print()
                if result.accepted:
                    print("Generated Server Request (in JSON):")
                    print(result.json_output)
                    return 0

                print(result.error)
                print("Let's go through the form again.")

        except (QuitRequested, EOFError, KeyboardInterrupt):
            print("\nExiting.")
            return 0


if __name__ == '__main__':
    sys.exit(main())
