import random

from notables.simulator import RULES, generate_batch, generate_log


class TestSimulator:
    def test_generated_logs_pass_validation(self, validator):
        for log in generate_batch(count=50, hours_ago=24):
            is_valid, errors = validator.validate(log)
            assert is_valid, errors

    def test_fixed_rule_and_source(self):
        log = generate_log(rule="Malware Detection", source_ip="10.0.0.1")
        assert log["ruleName"] == "Malware Detection"
        assert log["sourceIP"] == "10.0.0.1"

    def test_seeded_rng(self):
        log = generate_log(rng=random.Random(3))
        assert log["ruleName"] in RULES

    def test_batch_size(self):
        assert len(generate_batch(count=7)) == 7
