from cluedo import Card, CardSet, Player


def make_player(card_count=6):
    return Player("Alice", card_count)


def test_card_state_is_unknown_until_learned():
    player = make_player()

    assert player.has_card(Card.KNIFE) is None
    player.add_in_hand_card(Card.KNIFE)
    player.add_not_in_hand_card(Card.ROPE)

    assert player.has_card(Card.KNIFE) is True
    assert player.has_card(Card.ROPE) is False
    assert player.missing_card_count() == 5


def test_held_card_stays_held():
    player = make_player()
    player.add_in_hand_card(Card.KNIFE)

    player.add_possible_cards(CardSet([Card.GREEN, Card.HALL]))
    player.add_not_in_hand_card(Card.GREEN)
    player.add_not_in_hand_card(Card.PLUM)

    assert player.has_card(Card.KNIFE) is True


def test_possibility_collapses_to_its_last_card():
    player = make_player()
    player.add_possible_cards(CardSet([Card.PLUM, Card.ROPE]))

    player.add_not_in_hand_card(Card.ROPE)

    assert player.has_card(Card.PLUM) is True
    assert player.possibilities == []


def test_card_not_held_shrinks_possibility():
    player = make_player()
    player.add_possible_cards(CardSet([Card.PLUM, Card.ROPE, Card.HALL]))

    player.add_not_in_hand_card(Card.HALL)

    assert player.possibilities == [CardSet([Card.PLUM, Card.ROPE])]
    assert player.has_card(Card.PLUM) is None


def test_held_card_retires_possibility():
    player = make_player()
    player.add_possible_cards(CardSet([Card.PLUM, Card.ROPE, Card.HALL]))

    player.add_in_hand_card(Card.ROPE)

    assert player.possibilities == []
    assert player.has_card(Card.PLUM) is None


def test_later_superset_is_superfluous():
    player = make_player()
    player.add_possible_cards(CardSet([Card.PLUM, Card.ROPE]))
    player.add_possible_cards(CardSet([Card.PLUM, Card.ROPE, Card.HALL]))
    player.add_possible_cards(CardSet([Card.PLUM, Card.ROPE]))

    assert player.possibilities == [CardSet([Card.PLUM, Card.ROPE])]


def test_later_subset_is_kept():
    # Only a possibility implied by an earlier one is dropped.
    player = make_player()
    player.add_possible_cards(CardSet([Card.PLUM, Card.ROPE, Card.HALL]))
    player.add_possible_cards(CardSet([Card.PLUM, Card.ROPE]))

    assert player.possibilities == [
        CardSet([Card.PLUM, Card.ROPE, Card.HALL]),
        CardSet([Card.PLUM, Card.ROPE]),
    ]


def test_possible_cards_skip_cards_known_missing():
    player = make_player()
    player.add_not_in_hand_card(Card.ROPE)

    player.add_possible_cards(CardSet([Card.PLUM, Card.ROPE]))

    assert player.has_card(Card.PLUM) is True
    assert player.possibilities == []


def test_possible_cards_already_met_by_hand():
    player = make_player()
    player.add_in_hand_card(Card.HALL)

    player.add_possible_cards(CardSet([Card.PLUM, Card.ROPE, Card.HALL]))

    assert player.possibilities == []
    assert player.has_card(Card.PLUM) is None


def test_possible_cards_all_excluded_are_kept_unsatisfiable():
    player = make_player()
    player.add_not_in_hand_card(Card.PLUM)
    player.add_not_in_hand_card(Card.ROPE)

    player.add_possible_cards(CardSet([Card.PLUM, Card.ROPE]))

    assert player.possibilities == [CardSet([Card.PLUM, Card.ROPE])]


def test_contradiction_is_representable():
    player = make_player()
    player.add_in_hand_card(Card.GREEN)
    player.add_not_in_hand_card(Card.GREEN)

    assert player.cards_in_hand.contains(Card.GREEN)
    assert player.cards_not_in_hand.contains(Card.GREEN)


def test_copy_shares_no_state():
    player = make_player()
    player.add_possible_cards(CardSet([Card.PLUM, Card.ROPE, Card.HALL]))
    clone = player.copy()

    clone.add_in_hand_card(Card.GREEN)
    clone.add_not_in_hand_card(Card.HALL)

    assert player.has_card(Card.GREEN) is None
    assert player.has_card(Card.HALL) is None
    assert player.possibilities == [CardSet([Card.PLUM, Card.ROPE, Card.HALL])]
    assert clone.possibilities == [CardSet([Card.PLUM, Card.ROPE])]
