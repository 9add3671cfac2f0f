"""
Test fixtures shared across all Code Optimizer tests.
"""

import pytest

from code_optimizer.models.config_models import AnalysisConfig


@pytest.fixture
def js_scenario_code():
    """A mutable binding that is never reassigned, then a debug log."""
    return 'let userName = "John";\nconsole.log("Debug:", userName);'


@pytest.fixture
def python_scenario_code():
    return "msg = 'hi {}'.format(name)\nprint(msg)"


@pytest.fixture
def sample_javascript_code():
    """JavaScript with a mix of rule hits, near misses and comments."""
    return '''
const express = require("express");
let port = 8080;
let retries = 0;

for (let i = 0; i < 3; i++) {
    retries += 1;
}

app.get("/", function(req, res) {
    console.log("request", req.url);
    // console.log("commented out");
    res.send("ok");
});
'''


@pytest.fixture
def sample_python_code():
    """Python with format(), prints, os.path and an append loop."""
    return '''
import os

def build(items, name):
    base = os.path.join("out", name)
    result = []
    for item in items:
        result.append(item * 2)
    label = "{}: {}".format(name, len(result))
    print(label)
    # print("old debug")
    return base, result
'''


@pytest.fixture
def sample_rust_code():
    """Rust with clones and debug macros."""
    return '''
fn main() {
    let config = load_config();
    let name = config.name.clone();
    let copy = config.clone();
    use_config(config);
    dbg!(&copy);
    println!("hello {}", name);
}
'''


@pytest.fixture
def default_config():
    return AnalysisConfig()
