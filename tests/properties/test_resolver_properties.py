from hypothesis import given, strategies as st

from wc3launcher.resolver import DEFAULT_FILE_NAME, BinaryResolver, MappingResourceSet

segment = st.text(
    alphabet=st.characters(categories=["Lu", "Ll", "Nd"], include_characters="-_"),
    min_size=1,
    max_size=10,
).filter(lambda s: s.lower() != "wc3proxy")

resolver = BinaryResolver(MappingResourceSet({}))


@given(prefix=st.lists(segment, max_size=4))
def test_product_segment_names_output(prefix: list[str]) -> None:
    name = ".".join([*prefix, "wc3proxy", "exe"])

    assert resolver.derive_file_name(name) == "wc3proxy.exe"


@given(name=st.text(max_size=30))
def test_derived_name_is_never_hidden_or_empty(name: str) -> None:
    derived = resolver.derive_file_name(name)

    assert derived
    assert not derived.startswith(".") or derived == DEFAULT_FILE_NAME


@given(prefix=st.lists(segment, max_size=4))
def test_names_with_host_module_never_qualify(prefix: list[str]) -> None:
    name = ".".join([*prefix, "wc3launcher", "wc3proxy", "exe"])

    assert not resolver.qualifies(name)


@given(name=st.text(max_size=30))
def test_qualifying_names_end_with_suffix_and_carry_token(name: str) -> None:
    if resolver.qualifies(name):
        lower = name.lower()
        assert lower.endswith(".exe")
        assert "wc3proxy" in lower


@given(name=st.text(max_size=30))
def test_derived_name_stays_inside_output_dir(name: str) -> None:
    derived = resolver.derive_file_name(name)

    assert "/" not in derived
    assert "\\" not in derived
