"""Handles interactive/command-line mode for the Lox interpreter. Uses cmd as backend."""

import cmd


class Shell(cmd.Cmd):
    """Lox interpreter shell."""
    intro = "Lox interpreter :: Python backend\nType '?' or 'help' for more information."
    prompt = "> "
    secondary_prompt = ". "  # used for line continuations
    _tmp_prompt = "> "       # also used for prompt swapping in line continuations

    def __init__(self, sess, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.sess = sess

        self._tmp_line = ""
        self._tmp_line_num = 0  # line number of the first line of _tmp_line
        self.line_num = 0

    def default(self, line):
        """Executes arbitrary Lox code."""
        with self.sess.error_handler:  # needed because cmd.Cmd automatically exits on Exception
            self.line_num += 1
            if not self._tmp_line:
                self._tmp_line_num = self.line_num

            source = self._tmp_line + line
            if self.sess.preprocess_line(source):
                self._tmp_line = source + "\n"
                self.prompt = self.secondary_prompt
                return

            self._tmp_line = ""
            self.prompt = self._tmp_prompt

            if self.sess.add(source, self._tmp_line_num):
                self.sess.run()

    def do_help(self, arg):
        """Doesnt return docs, but rather a short intro."""
        self.sess.output(
            "Welcome to the Lox interpreter!\n\n"
            "Lox is a small dynamically-typed scripting language with C-like syntax, first-class functions and \n"
            "closures. Statements end with ';' and blocks can span several lines.\n\n"
            "Try it out by typing 'var greeting = \"hello\";'. Next, try typing 'print greeting + \" world\";'.\n"
            "Variables and functions are kept for the rest of the session."
        )

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        return ""

    def do_EOF(self, arg):
        """Exits interpreter."""
        self.sess.output("")
        return self.do_exit(arg)

    def do_exit(self, arg):
        """Exits interpreter."""
        return True
