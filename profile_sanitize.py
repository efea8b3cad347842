#!/usr/bin/env python3
"""Profile sanitize() to find performance bottlenecks."""

import cProfile
import io
import pstats

from sanehtml import sanitize

# Sample user-generated markup
html = """
<div class="comment" id="c1">
    <p onclick="steal()">Paragraph with <a href="https://example.com" rel="me">a link</a>
    and <a href="javascript:alert(1)">a bad one</a>.</p>
    <script>alert("x")</script>
    <img src="/avatar.png" alt="avatar" onerror="steal()">
    <table>
        <tr><td>Cell 1</td><td style="color:red">Cell 2</td></tr>
        <tr><td>Cell 3</td><td><font>Cell 4</font></td></tr>
    </table>
    <form action="/x"><input name="q"><button>go</button></form>
</div>
""" * 100  # Repeat for more meaningful results

# Profile
pr = cProfile.Profile()
pr.enable()

for _ in range(10):
    result = sanitize(
        html,
        allow_class_name=lambda name: name == "comment",
        add_link_rel=lambda href: ["nofollow"],
        remove_contents=False,
    )

pr.disable()

# Print stats
s = io.StringIO()
ps = pstats.Stats(pr, stream=s).sort_stats("cumulative")
ps.print_stats(50)  # Top 50 functions
print(s.getvalue())
