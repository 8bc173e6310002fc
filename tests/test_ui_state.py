from ui import state


def test_starts_with_one_empty_resume():
    assert state.initial_resumes() == [{"id": "1", "text": ""}]


def test_add_stops_at_twenty():
    resumes = state.initial_resumes()
    for _ in range(25):
        resumes = state.add_resume(resumes)
    assert len(resumes) == state.MAX_RESUMES
    assert resumes[-1]["id"] == "20"
    assert not state.can_add(resumes)


def test_add_after_remove_uses_next_free_id():
    resumes = state.add_resume(state.add_resume(state.initial_resumes()))
    resumes = state.remove_resume(resumes, "2")
    assert [r["id"] for r in resumes] == ["1", "3"]
    assert [r["id"] for r in state.add_resume(resumes)] == ["1", "3", "4"]


def test_last_resume_cannot_be_removed():
    resumes = state.initial_resumes()
    assert state.remove_resume(resumes, "1") == resumes
    assert not state.can_remove(resumes)


def test_update_does_not_mutate_input():
    resumes = state.add_resume(state.initial_resumes())
    updated = state.update_resume(resumes, "2", "SQL, Looker")
    assert resumes[1]["text"] == ""
    assert updated[1] == {"id": "2", "text": "SQL, Looker"}
    assert state.valid_resumes(updated) == [{"id": "2", "text": "SQL, Looker"}]


def test_result_helpers(model_output):
    result = model_output(ids=("1", "2", "3"), top=["3", "1", "missing"])
    assert state.select_initial(result) == "3"
    assert [e["resumeId"] for e in state.top_evaluations(result)] == ["3", "1"]
    assert state.find_evaluation(result, "2")["resumeId"] == "2"
    assert state.find_evaluation(result, None) is None
    assert state.select_initial({"evaluations": [], "topCandidates": []}) is None
    assert state.select_initial(None) is None


def test_limits_and_weights_come_from_the_rubric():
    from screening import rubric

    assert state.MAX_RESUMES == rubric.MAX_RESUMES
    assert state.criteria_view() == [
        ("technicalSkills", "Technical Skills", "40%"),
        ("practicalExperience", "Practical Experience", "30%"),
        ("analyticalThinking", "Analytical Thinking", "20%"),
        ("communicationEvidence", "Communication Evidence", "10%"),
    ]
