"""
Calculator Engine for PocketCalc
Expression entry, evaluation triggers and result chaining
"""
import logging

import config
from evaluator import EvalError, UnaryOp, evaluate_standard, evaluate_unary
from storage import PersistenceError

logger = logging.getLogger(__name__)

OPERATORS = "+-*/"
DIGITS = "0123456789."


class Calculator:
    def __init__(self, history_manager):
        self.history_manager = history_manager
        self.current_expression = ""
        self.display_result = config.EMPTY_EXPRESSION_TEXT
        self.notice = None

    def add_digit(self, digit):
        """Add a digit or decimal point to current expression"""
        # Malformed literals like "1.2.3" are left for the evaluator to reject
        self.current_expression += str(digit)
        return self.current_expression

    def add_operator(self, operator):
        """Add an operator, replacing a trailing one"""
        operator = config.KEYPAD_OPERATORS.get(operator)
        if operator is None:
            raise ValueError("Unknown operator")

        if not self.current_expression and operator != "-":
            return self.current_expression

        if self.current_expression and self.current_expression[-1] in OPERATORS:
            self.current_expression = self.current_expression[:-1] + operator
        else:
            self.current_expression += operator
        return self.current_expression

    def clear(self):
        """Clear expression and result"""
        self.current_expression = ""
        self.display_result = config.EMPTY_EXPRESSION_TEXT
        return self.current_expression

    def clear_entry(self):
        """Clear last entry (backspace)"""
        self.current_expression = self.current_expression[:-1]
        return self.current_expression

    def evaluate(self):
        """Evaluate the current expression and chain the result.

        An empty expression is ignored. On failure the result shows the error
        text and the expression is kept for correction.
        """
        if not self.current_expression:
            return self.display_result

        expression = self.current_expression
        try:
            result = evaluate_standard(expression)
        except EvalError as e:
            logger.debug("Could not evaluate %r: %s", expression, e)
            self.display_result = config.ERROR_TEXT
            return self.display_result

        self._finish(result, f"{expression} = {result}")
        return result

    def apply_unary(self, operation):
        """Apply square root, square or percentage to the whole expression"""
        op = UnaryOp(operation)
        expression = self.current_expression
        try:
            result, entry = evaluate_unary(expression, op)
        except EvalError as e:
            logger.debug("Could not apply %s to %r: %s", op.value, expression, e)
            self.display_result = config.ERROR_TEXT
            return self.display_result

        self._finish(result, entry)
        return result

    def _finish(self, result, entry):
        self.display_result = result
        self.current_expression = result
        try:
            self.history_manager.record(entry)
            self.notice = None
        except PersistenceError:
            self.notice = "Failed to save history"

    def clear_history(self):
        """Clear calculation history; returns False if storage failed"""
        try:
            self.history_manager.clear()
        except PersistenceError:
            self.notice = "Failed to clear history"
            return False
        self.notice = None
        return True

    def press(self, button):
        """Dispatch a keypad label to the matching operation"""
        if len(button) == 1 and button in DIGITS:
            self.add_digit(button)
        elif button in config.KEYPAD_OPERATORS:
            self.add_operator(button)
        elif button in config.KEYPAD_UNARY:
            self.apply_unary(config.KEYPAD_UNARY[button])
        elif button == "=":
            self.evaluate()
        elif button == "C":
            self.clear()
        elif button == "⌫":
            self.clear_entry()
        else:
            raise ValueError(f"Unknown button: {button}")
        return self.state()

    def get_expression(self):
        """Get current expression"""
        return self.current_expression if self.current_expression else config.EMPTY_EXPRESSION_TEXT

    def state(self):
        return {
            "expression": self.get_expression(),
            "result": self.display_result,
            "history": self.history_manager.get_calculation_history(),
            "notice": self.notice,
        }
