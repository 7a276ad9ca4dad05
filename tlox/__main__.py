"""
Same as the "tlox" console script:

    py -m tlox program.lox

runs program.lox, and

    py -m tlox

starts the prompt.
"""
from tlox.cmdline import main

main()
