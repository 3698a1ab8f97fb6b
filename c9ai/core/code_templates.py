"""Starter programs for "create a program to ..." requests

Language is detected from the prompt, topic picks the template. Topics
without a template in the detected language fall back to the generic one.
"""

import re
from typing import Dict, Tuple

LANGUAGES = [
    # (pattern, language, filename) - javascript must be checked before java
    (r"\b(javascript|js|node)\b", "javascript", "program.js"),
    (r"\b(python|py)\b", "python", "program.py"),
    (r"\bjava\b", "java", "Program.java"),
    (r"(c\+\+|\bcpp\b)", "cpp", "program.cpp"),
]

TOPICS = [
    ("compound interest", "compound_interest"),
    ("prime", "prime"),
    ("calculator", "calculator"),
    ("fibonacci", "fibonacci"),
    ("sort", "sorting"),
    ("array", "sorting"),
    ("factorial", "factorial"),
]

PYTHON_TEMPLATES: Dict[str, str] = {
    "compound_interest": '''# Compound Interest Calculator
def calculate_compound_interest(principal, rate, time, compounds_per_year=1):
    """A = P(1 + r/n)^(nt)"""
    amount = principal * (1 + rate / 100 / compounds_per_year) ** (compounds_per_year * time)
    return amount, amount - principal


def main():
    print("=== Compound Interest Calculator ===")
    try:
        principal = float(input("Enter principal amount: $"))
        rate = float(input("Enter annual interest rate (%): "))
        time = float(input("Enter time period (years): "))
        compounds = int(input("Enter compounding frequency per year (default 1): ") or "1")
    except ValueError:
        print("Please enter valid numbers!")
        return

    amount, interest = calculate_compound_interest(principal, rate, time, compounds)
    print(f"\\nFinal Amount: ${amount:,.2f}")
    print(f"Compound Interest: ${interest:,.2f}")


if __name__ == "__main__":
    main()
''',
    "prime": '''# Prime Number Checker
def is_prime(n):
    if n < 2:
        return False
    if n % 2 == 0:
        return n == 2
    for i in range(3, int(n ** 0.5) + 1, 2):
        if n % i == 0:
            return False
    return True


def main():
    print("=== Prime Number Checker ===")
    try:
        num = int(input("Enter a number to check: "))
    except ValueError:
        print("Please enter a valid number!")
        return
    if is_prime(num):
        print(f"✅ {num} is a prime number!")
    else:
        print(f"❌ {num} is not a prime number.")
    print("Primes below 30:", [n for n in range(30) if is_prime(n)])


if __name__ == "__main__":
    main()
''',
    "calculator": '''# Simple Calculator
OPERATIONS = {
    "+": lambda a, b: a + b,
    "-": lambda a, b: a - b,
    "*": lambda a, b: a * b,
    "/": lambda a, b: a / b,
}


def main():
    print("=== Calculator === (type 'q' to quit)")
    while True:
        expression = input("Enter expression (e.g. 3 * 4): ").strip()
        if expression.lower() == "q":
            break
        try:
            left, op, right = expression.split()
            print("=", OPERATIONS[op](float(left), float(right)))
        except (ValueError, KeyError):
            print("Format: <number> <+|-|*|/> <number>")
        except ZeroDivisionError:
            print("Cannot divide by zero!")


if __name__ == "__main__":
    main()
''',
    "fibonacci": '''# Fibonacci Sequence
def fibonacci(n):
    sequence = []
    a, b = 0, 1
    for _ in range(n):
        sequence.append(a)
        a, b = b, a + b
    return sequence


def main():
    try:
        count = int(input("How many Fibonacci numbers? "))
    except ValueError:
        print("Please enter a valid number!")
        return
    print(fibonacci(count))


if __name__ == "__main__":
    main()
''',
    "sorting": '''# Sorting Demo
def bubble_sort(items):
    items = list(items)
    for i in range(len(items)):
        for j in range(len(items) - i - 1):
            if items[j] > items[j + 1]:
                items[j], items[j + 1] = items[j + 1], items[j]
    return items


def main():
    raw = input("Enter numbers separated by spaces: ")
    try:
        numbers = [float(x) for x in raw.split()]
    except ValueError:
        print("Please enter valid numbers!")
        return
    print("Sorted:", bubble_sort(numbers))


if __name__ == "__main__":
    main()
''',
    "factorial": '''# Factorial Calculator
def factorial(n):
    result = 1
    for i in range(2, n + 1):
        result *= i
    return result


def main():
    try:
        n = int(input("Enter a non-negative integer: "))
    except ValueError:
        print("Please enter a valid number!")
        return
    if n < 0:
        print("Factorial is not defined for negative numbers.")
        return
    print(f"{n}! = {factorial(n)}")


if __name__ == "__main__":
    main()
''',
    "generic": '''# __TASK__
def main():
    print("Hello! This is a generated program.")
    print("Task: __TASK__")


if __name__ == "__main__":
    main()
''',
}

JAVASCRIPT_TEMPLATES: Dict[str, str] = {
    "compound_interest": '''// Compound Interest Calculator
function calculateCompoundInterest(principal, rate, time, compoundsPerYear = 1) {
    const amount = principal * Math.pow(1 + rate / 100 / compoundsPerYear, compoundsPerYear * time);
    return { amount, compoundInterest: amount - principal };
}

const [principal, rate, time, compounds] = process.argv.slice(2).map(Number);
if ([principal, rate, time].some(Number.isNaN)) {
    console.log("Usage: node program.js <principal> <rate%> <years> [compounds]");
} else {
    const result = calculateCompoundInterest(principal, rate, time, compounds || 1);
    console.log(`Final Amount: $${result.amount.toFixed(2)}`);
    console.log(`Compound Interest: $${result.compoundInterest.toFixed(2)}`);
}
''',
    "prime": '''// Prime Number Checker
function isPrime(n) {
    if (n < 2) return false;
    if (n % 2 === 0) return n === 2;
    for (let i = 3; i <= Math.sqrt(n); i += 2) {
        if (n % i === 0) return false;
    }
    return true;
}

const num = parseInt(process.argv[2], 10);
if (Number.isNaN(num)) {
    console.log("Usage: node program.js <number>");
} else {
    console.log(isPrime(num) ? `✅ ${num} is a prime number!` : `❌ ${num} is not a prime number.`);
}
''',
    "fibonacci": '''// Fibonacci Sequence
function fibonacci(n) {
    const sequence = [];
    let [a, b] = [0, 1];
    for (let i = 0; i < n; i++) {
        sequence.push(a);
        [a, b] = [b, a + b];
    }
    return sequence;
}

console.log(fibonacci(parseInt(process.argv[2] || "10", 10)));
''',
    "generic": '''// __TASK__
function main() {
    console.log("Hello! This is a generated program.");
    console.log("Task: __TASK__");
}

main();
''',
}

JAVA_GENERIC = '''// __TASK__
public class Program {
    public static void main(String[] args) {
        System.out.println("Hello! This is a generated program.");
        System.out.println("Task: __TASK__");
    }
}
'''

CPP_GENERIC = '''// __TASK__
#include <iostream>

int main() {
    std::cout << "Hello! This is a generated program." << std::endl;
    std::cout << "Task: __TASK__" << std::endl;
    return 0;
}
'''

TEMPLATES = {
    "python": PYTHON_TEMPLATES,
    "javascript": JAVASCRIPT_TEMPLATES,
    "java": {"generic": JAVA_GENERIC},
    "cpp": {"generic": CPP_GENERIC},
}


def detect_language(prompt: str) -> Tuple[str, str]:
    lower = prompt.lower()
    for pattern, language, filename in LANGUAGES:
        if re.search(pattern, lower):
            return language, filename
    return "python", "program.py"


def detect_topic(prompt: str) -> str:
    lower = prompt.lower()
    for keyword, topic in TOPICS:
        if keyword in lower:
            return topic
    return "generic"


def task_description(prompt: str) -> str:
    description = re.sub(r"\b(create|make|write|program|code|script)\b", "", prompt, flags=re.IGNORECASE)
    return re.sub(r"\s+", " ", description).strip() or "Generated Program"


def generate_code(prompt: str) -> Tuple[str, str]:
    """Return (filename, source) for a code-generation prompt"""
    language, filename = detect_language(prompt)
    templates = TEMPLATES[language]
    source = templates.get(detect_topic(prompt), templates["generic"])
    return filename, source.replace("__TASK__", task_description(prompt))
