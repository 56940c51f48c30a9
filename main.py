from rich.pretty import pprint

from argot.tasks import TASKS

if __name__ == '__main__':
    for text in ("create task buy some milk", "view task 3", "view my tasks", "water the plants"):
        if (resolution := TASKS.interpret(text, shell=True, fancy=True, colorful=True)) is not None:
            pprint(resolution.command)
            pprint(resolution.typed())
