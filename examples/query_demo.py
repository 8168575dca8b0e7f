"""
Example: Query engine demonstration (no browser needed)
"""

from ariafind import AmbiguousMatchError, HasLabel, HasRole, HasText, find, find_all, mount

MARKUP = """
<form>
  <h1>Sign in</h1>
  <label for="email">Email address</label>
  <input id="email" type="email" placeholder="you@example.com"/>
  <label>Password <input type="password"/></label>
  <button type="submit">Sign in</button>
  <button type="button" style="visibility:hidden">Hidden helper</button>
  <a href="/forgot">Forgot password?</a>
</form>
"""


def main():
    container = mount(MARKUP)

    print("=== Query Examples ===\n")

    # Find all buttons (hidden ones still have the role)
    buttons = find_all(container, HasRole("button"))
    print(f"Found {len(buttons)} buttons")

    # Form controls by their visible label
    email = find(container, HasLabel("Email address"))
    password = find(container, HasLabel("Password"))
    print(f"Email field: {email}, password field: {password}")

    # Same query as a selector string
    submit = find(container, "role=button text~'Sign in'")
    print(f"Submit button: {submit} ({submit.inner_text!r})")

    # Hidden text never matches
    print(f"Hidden helper found: {find(container, HasText('Hidden helper')) is not None}")

    # "Sign in" is shown twice (heading and button), so find() refuses to guess
    try:
        find(container, HasText("Sign in"))
    except AmbiguousMatchError as e:
        print(f"\n{e}")


if __name__ == "__main__":
    main()
