import contextlib
import importlib.util
from pathlib import Path
import types

from finwise.analysis import (
    AnalysisOutcome,
    AnalysisRunner,
    EXPENSES_EXCEED_INCOME_ERROR,
    FinancialInput,
    FixedRandomSource,
    analyze,
)
from finwise.grocery import GroceryPlanner
from finwise.storage import GroceryRepository, MemoryStore

PAGE_PATH = Path(__file__).resolve().parents[1] / 'finwise' / 'Home.py'


def _load_page_module():
    spec = importlib.util.spec_from_file_location('finwise_home_test', PAGE_PATH)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def _fake_st(state):
    return types.SimpleNamespace(session_state=state, spinner=lambda text: contextlib.nullcontext())


def test_planner_created_once_per_session(monkeypatch):
    module = _load_page_module()
    state = {}
    store = MemoryStore()
    monkeypatch.setattr(module, 'st', _fake_st(state))
    monkeypatch.setattr(module, 'JsonFileStore', lambda: store)

    planner = module._get_planner()
    assert isinstance(planner, GroceryPlanner)
    assert module._get_planner() is planner
    assert state['grocery_planner'] is planner


def test_add_grocery_item_clears_inputs(monkeypatch):
    module = _load_page_module()
    planner = GroceryPlanner(GroceryRepository(MemoryStore()))
    state = {'grocery_planner': planner, 'grocery_new_item': 'Milk', 'grocery_new_price': '4.50'}
    monkeypatch.setattr(module, 'st', _fake_st(state))

    module._add_grocery_item()
    assert [(i.name, i.price, i.category) for i in planner.items] == [('Milk', 4.5, 'Dairy')]
    assert state['grocery_new_item'] == ''
    assert state['grocery_new_price'] == ''


def test_picking_suggestion_fills_item_field(monkeypatch):
    module = _load_page_module()
    planner = GroceryPlanner(GroceryRepository(MemoryStore()))
    state = {'grocery_planner': planner, 'grocery_new_item': 'ban', 'grocery_new_price': '0.99'}
    monkeypatch.setattr(module, 'st', _fake_st(state))

    module._pick_suggestion('Bananas')
    assert state['grocery_new_item'] == 'Bananas'
    assert state['grocery_new_price'] == '0.99'
    assert planner.item_count() == 0

    module._add_grocery_item()
    assert [(i.name, i.price, i.category) for i in planner.items] == [('Bananas', 0.99, 'Produce')]


def test_blank_grocery_item_keeps_inputs(monkeypatch):
    module = _load_page_module()
    planner = GroceryPlanner(GroceryRepository(MemoryStore()))
    state = {'grocery_planner': planner, 'grocery_new_item': '  ', 'grocery_new_price': '3'}
    monkeypatch.setattr(module, 'st', _fake_st(state))

    module._add_grocery_item()
    assert planner.item_count() == 0
    assert state['grocery_new_price'] == '3'


def test_build_input_parses_text_fields(monkeypatch):
    module = _load_page_module()
    state = {'income_text': '5,000', 'expenses_text': '', 'risk_level': 'high'}
    monkeypatch.setattr(module, 'st', _fake_st(state))

    financial_input = module._build_input()
    assert financial_input == FinancialInput(5000.0, None, 'high')


def test_submit_analysis_stores_errors_without_running(monkeypatch):
    module = _load_page_module()
    state = {'income_text': '3000', 'expenses_text': '3000'}
    monkeypatch.setattr(module, 'st', _fake_st(state))

    def fail_run(financial_input):
        raise AssertionError("invalid input must not be analyzed")

    monkeypatch.setattr(module, '_run_analysis', fail_run)
    module._submit_analysis()
    assert state['analysis_errors'] == {'expenses': EXPENSES_EXCEED_INCOME_ERROR}
    assert 'analysis_result' not in state


def test_submit_analysis_stores_result(monkeypatch):
    module = _load_page_module()
    state = {'income_text': '5000', 'expenses_text': '3500'}
    monkeypatch.setattr(module, 'st', _fake_st(state))
    monkeypatch.setattr(module.config, 'ANALYSIS_DELAY_SECONDS', 0)

    module._submit_analysis()
    assert state['analysis_errors'] == {}
    assert state['analysis_result'].savings == 1500
    assert state['analysis_figures'] == (5000.0, 3500.0)


def test_submit_analysis_ignores_superseded_run(monkeypatch):
    module = _load_page_module()
    state = {'income_text': '5000', 'expenses_text': '3500'}
    monkeypatch.setattr(module, 'st', _fake_st(state))
    monkeypatch.setattr(module, '_run_analysis', lambda financial_input: None)

    module._submit_analysis()
    assert 'analysis_result' not in state


def test_clear_error_and_reset(monkeypatch):
    module = _load_page_module()
    state = {
        'analysis_errors': {'income': 'bad', 'expenses': 'worse'},
        'analysis_result': object(),
        'analysis_figures': (1, 0),
        'income_text': '1',
        'expenses_text': '0',
        'risk_level': 'low',
    }
    monkeypatch.setattr(module, 'st', _fake_st(state))

    module._clear_error('income')
    assert state['analysis_errors'] == {'expenses': 'worse'}

    module._reset_analysis()
    assert 'analysis_result' not in state
    assert 'analysis_errors' not in state
    assert 'risk_level' not in state
    assert state['income_text'] == ''


def test_run_analysis_returns_outcome(monkeypatch):
    module = _load_page_module()
    state = {}
    monkeypatch.setattr(module, 'st', _fake_st(state))
    monkeypatch.setattr(module.config, 'ANALYSIS_DELAY_SECONDS', 0)

    outcome = module._run_analysis(FinancialInput(200, 50, 'low'))
    assert isinstance(outcome, AnalysisOutcome)
    assert outcome.result.savings == 150


def test_analysis_runner_is_shared_across_reruns(monkeypatch):
    module = _load_page_module()
    state = {}
    monkeypatch.setattr(module, 'st', _fake_st(state))
    monkeypatch.setattr(module.config, 'ANALYSIS_DELAY_SECONDS', 0)

    runner = module._get_runner()
    assert isinstance(runner, AnalysisRunner)
    assert module._get_runner() is runner

    outcome = module._run_analysis(FinancialInput(5000, 3500))
    assert state['analysis_runner'] is runner
    assert runner.latest is outcome
    assert not runner.pending

    module._reset_analysis()
    assert runner.latest is None


def test_breakdown_table_shows_amounts():
    module = _load_page_module()
    result = analyze(FinancialInput(5000, 3500), FixedRandomSource(0))

    table = module._breakdown_table(result, 5000)
    assert list(table.columns) == ['Category', 'Percentage', 'Amount']
    assert table['Category'].tolist() == ['Essential Expenses', 'Discretionary Spending', 'Savings & Investments']
    assert table['Percentage'].tolist() == ['50.0%', '30.0%', '20.0%']
    assert table['Amount'].tolist() == ['$2,500', '$1,500', '$1,000']


def test_grocery_table_lists_items():
    module = _load_page_module()
    planner = GroceryPlanner(GroceryRepository(MemoryStore()))
    milk = planner.add_item('Milk', 4.25)
    planner.add_item('Quinoa', 6)
    planner.toggle_item(milk.id)

    table = module._grocery_table(planner)
    assert list(table.columns) == ['Name', 'Category', 'Price', 'Completed']
    assert table['Name'].tolist() == ['Milk', 'Quinoa']
    assert table['Category'].tolist() == ['Dairy', 'Other']
    assert table['Price'].tolist() == ['$4.25', '$6.00']
    assert table['Completed'].tolist() == [True, False]
