from consolidator.schemas import Rule, RuleAction
from consolidator.services.rule_engine import (
    UNCATEGORIZED,
    CompiledRule,
    CompiledRuleSet,
    compile_rules,
    matches_keyword,
    resolve_rules,
)


def categorize(keyword, category, priority=0, id=None, **kwargs):
    return Rule(id=id, keyword=keyword, action=RuleAction.CATEGORIZE,
                category=category, priority=priority, **kwargs)


def ignore(keyword, priority=0, id=None, **kwargs):
    return Rule(id=id, keyword=keyword, action=RuleAction.IGNORE, priority=priority, **kwargs)


def test_whole_word_matching():
    rules = [categorize("CAT", "Pets")]
    assert resolve_rules("CAT FOOD", None, rules).category == "Pets"
    assert resolve_rules("CATALOG PURCHASE", None, rules).category == UNCATEGORIZED
    assert resolve_rules("BIG-CAT.", None, rules).category == "Pets"


def test_case_sensitivity():
    assert matches_keyword("coffee shop", "COFFEE")
    assert not matches_keyword("coffee shop", "COFFEE", case_sensitive=True)
    assert matches_keyword("COFFEE SHOP", "COFFEE", case_sensitive=True)


def test_keywords_are_literal():
    rules = [categorize("A+B (UK)", "Shops"), categorize(".*", "Everything")]
    assert resolve_rules("PAID A+B (UK) LTD", None, rules).category == "Shops"
    assert resolve_rules("ANYTHING ELSE", None, rules).category == UNCATEGORIZED


def test_higher_priority_wins_regardless_of_input_order():
    low = categorize("AMAZON", "Shopping", priority=5, id=1)
    high = categorize("AMAZON", "Books", priority=10, id=2)
    assert resolve_rules("AMAZON MKTPLACE", None, [low, high]).category == "Books"
    assert resolve_rules("AMAZON MKTPLACE", None, [high, low]).category == "Books"


def test_equal_priority_runs_by_id():
    first = categorize("UBER", "Transport", id=3)
    second = categorize("UBER", "Food", id=7)
    assert resolve_rules("UBER EATS", None, [second, first]).category == "Transport"
    assert resolve_rules("UBER EATS", None, [first, second]).category == "Transport"


def test_ignore_and_categorize_are_independent():
    rules = [ignore("TRANSFER", priority=1), categorize("SAVINGS", "Savings")]
    result = resolve_rules("TRANSFER TO SAVINGS", None, rules)
    assert result.ignore is True
    assert result.category == "Savings"


def test_fallback_category():
    rules = [categorize("RENT", "Housing")]
    assert resolve_rules("GROCERIES", "Food", rules).category == "Food"
    assert resolve_rules("GROCERIES", None, rules).category == UNCATEGORIZED
    assert resolve_rules("", "Food", rules).category == "Food"
    assert resolve_rules(None, None, rules).ignore is False


def test_disabled_and_blank_rules_are_skipped():
    rules = [
        categorize("RENT", "Housing", enabled=False),
        categorize("", "Anything"),
        categorize("RENT", None),
    ]
    assert len(compile_rules(rules)) == 1
    assert resolve_rules("RENT MAY", None, rules).category == UNCATEGORIZED


def test_compiled_rules_are_reusable():
    compiled = compile_rules([categorize("GAS", "Fuel")])
    assert compile_rules(compiled) is compiled
    assert resolve_rules("SHELL GAS", None, compiled).category == "Fuel"


class _BrokenPattern:
    def search(self, text):
        raise RuntimeError("matcher failed")


def test_matching_errors_fall_back_to_default():
    broken = CompiledRuleSet([
        CompiledRule(rule=ignore("ANY"), pattern=_BrokenPattern()),
    ])
    result = resolve_rules("ANY THING", "Food", broken)
    assert result.ignore is False
    assert result.category == "Food"
    assert resolve_rules("ANY THING", None, broken).category == UNCATEGORIZED
