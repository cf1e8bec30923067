"""
Texas Hold'em Round - State Machine Implementation.

A ``Round`` plays one hand of Texas Hold'em at a table:
- Blind posting by the two seats clockwise of the dealer
- Dealing hole cards and the flop, turn and river from a fresh deck
- Betting streets (fold, check, call, bet, raise, all-in; no-limit only)
- Early finish when all but one player fold
- Showdown with side pots and odd-chip assignment

Players are held by reference and addressed by seat index; the round never
copies chip state. The round is driven either step by step through
``take_action`` or by the table calling out to agents for each decision.

Reference: WSOP Official Tournament Rules
"""

from __future__ import annotations
from typing import List, Dict, Optional, Any, Union
from dataclasses import dataclass, field
import logging
import random

from holdem.core.card import Card, Deck
from holdem.core.errors import (
    InvalidInputError, RuleViolation, UnsupportedBettingStructureError,
)
from holdem.core.hand import Hand, HandRank, rank_hand
from holdem.core.player import Player
from holdem.core.rules import (
    RoundState, ActionType, PlayerState, BETTING_STATES, NEXT_STREET, STREET_CARDS,
    get_blind_positions, get_first_to_act_preflop, get_first_to_act_postflop,
    seats_clockwise_from_dealer, calculate_min_raise, is_action_reopened, split_pot,
    next_seat, HOLE_CARDS, MIN_PLAYERS, MAX_PLAYERS,
)


logger = logging.getLogger(__name__)


@dataclass
class Pot:
    """Represents a pot (main pot or side pot)."""
    amount: int = 0
    eligible_seats: List[int] = field(default_factory=list)

    def add(self, amount: int) -> None:
        self.amount += amount


@dataclass
class ActionResult:
    """Result of a player action or table operation."""
    success: bool
    message: str
    action_type: Optional[ActionType] = None
    amount: int = 0
    error: Optional[RuleViolation] = None


@dataclass
class Winner:
    """Chips awarded to one seat at the end of a round."""
    seat: int
    name: str
    amount: int
    hand_rank: Optional[HandRank] = None

    @property
    def description(self) -> str:
        if self.hand_rank is None:
            return "All other players folded"
        return self.hand_rank.describe()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "seat": self.seat,
            "name": self.name,
            "amount": self.amount,
            "hand": self.hand_rank.to_dict() if self.hand_rank else None,
            "description": self.description,
        }


@dataclass
class RoundResult:
    """Outcome of a complete round."""
    success: bool
    message: str
    winners: List[Winner] = field(default_factory=list)
    showdown: bool = False
    pot: int = 0
    community_cards: List[Card] = field(default_factory=list)
    eliminated: List[str] = field(default_factory=list)
    error: Optional[RuleViolation] = None


class Round:
    """
    One round (hand) of no-limit Texas Hold'em.

    Usage:
        rnd = Round(players, dealer_seat_index=0, small_blind=1, big_blind=3)
        rnd.start()

        while rnd.is_running():
            seat = rnd.current_player_index
            action = decide(rnd.get_state(for_seat=seat))  # From UI or agent
            result = rnd.take_action(action["action"], action.get("amount", 0), seat=seat)

        winners = rnd.get_winners()
    """

    def __init__(
        self,
        players: List[Player],
        dealer_seat_index: int,
        small_blind: int,
        big_blind: int,
        rng: Optional[random.Random] = None,
        limit: bool = False,
    ):
        """
        Initialize a round.

        Args:
            players: Seated players in clockwise order (held by reference)
            dealer_seat_index: Seat holding the dealer button
            small_blind: Small blind amount
            big_blind: Big blind amount
            rng: Randomness source for the deck shuffle
            limit: Fixed-limit betting; not supported

        Raises:
            UnsupportedBettingStructureError: If ``limit`` is True
            InvalidInputError: On a bad player count, dealer seat, blinds,
                or a seated player without chips
        """
        if limit:
            raise UnsupportedBettingStructureError("Fixed-limit betting is not implemented")
        if not MIN_PLAYERS <= len(players) <= MAX_PLAYERS:
            raise InvalidInputError(
                f"A round needs {MIN_PLAYERS}-{MAX_PLAYERS} players, got {len(players)}"
            )
        if not 0 <= dealer_seat_index < len(players):
            raise InvalidInputError(
                f"Dealer seat {dealer_seat_index} out of range for {len(players)} players"
            )
        if small_blind <= 0 or big_blind < small_blind:
            raise InvalidInputError(
                f"Invalid blinds: small={small_blind}, big={big_blind}"
            )
        broke = [p.name for p in players if p.chips <= 0]
        if broke:
            raise InvalidInputError(f"Players without chips cannot be dealt in: {broke}")

        self.players = players
        self.dealer_position = dealer_seat_index
        self.small_blind = small_blind
        self.big_blind = big_blind
        self.limit = limit
        self._rng = rng

        self.deck: Optional[Deck] = None
        self.community_cards = Hand()
        self.state = RoundState.INITIALIZED
        self.state_history: List[RoundState] = [RoundState.INITIALIZED]

        self.small_blind_position, self.big_blind_position = get_blind_positions(
            self.num_players, self.dealer_position
        )
        self.current_player_index = -1

        # Betting state
        self.current_bet = 0  # Current highest bet on this street
        self.last_raise_amount = 0  # Size of the last full raise

        self.pots: List[Pot] = [Pot()]
        self.winners: List[Winner] = []
        self.showdown = False
        self._pot_awarded = 0

        # Hand history for replay
        self.hand_history: List[Dict[str, Any]] = []

    @property
    def num_players(self) -> int:
        return len(self.players)

    @property
    def num_in_hand(self) -> int:
        """Number of players still in the hand."""
        return sum(1 for p in self.players if p.is_in_hand)

    @property
    def current_player(self) -> Optional[Player]:
        """The player whose turn it is to act."""
        if self.state not in BETTING_STATES or self.current_player_index < 0:
            return None
        return self.players[self.current_player_index]

    @property
    def pot_total(self) -> int:
        """Chips committed this round: collected pots plus bets on the current street."""
        collected = sum(pot.amount for pot in self.pots)
        return collected + sum(p.current_bet for p in self.players)

    def is_running(self) -> bool:
        """Check if the round has started and not yet paid out."""
        return self.state not in (RoundState.INITIALIZED, RoundState.POT_DISTRIBUTED)

    def is_finished(self) -> bool:
        return self.state == RoundState.POT_DISTRIBUTED

    def _transition(self, state: RoundState) -> None:
        logger.debug(f"Round state {self.state.name} -> {state.name}")
        self.state = state
        self.state_history.append(state)

    def start(self) -> ActionResult:
        """
        Post blinds, deal hole cards and open preflop betting.

        Returns:
            ActionResult indicating whether the round started
        """
        if self.state != RoundState.INITIALIZED:
            return ActionResult(False, "Round already started", error=RuleViolation.INVALID_ACTION)

        logger.info(
            f"Starting round: {self.num_players} players, "
            f"dealer {self.players[self.dealer_position].name}"
        )

        self.deck = Deck(shuffle=True, rng=self._rng)
        self.community_cards = Hand()
        for player in self.players:
            player.reset_for_new_round()

        self._post_blinds()
        self._transition(RoundState.BLINDS_POSTED)

        self._deal_hole_cards()
        self._transition(RoundState.HOLE_CARDS_DEALT)

        self._log_action("ROUND_START", {
            "dealer": self.dealer_position,
            "small_blind": self.small_blind_position,
            "big_blind": self.big_blind_position,
        })

        self._transition(RoundState.PREFLOP_BETTING)
        self._setup_betting_round()
        self._progress()

        return ActionResult(True, "Round started")

    def _post_blinds(self) -> None:
        """Post small and big blinds; a short stack posts all-in for less."""
        sb_player = self.players[self.small_blind_position]
        bb_player = self.players[self.big_blind_position]

        sb_amount = sb_player.bet(self.small_blind)
        sb_player.last_action = f"SB {sb_amount}"

        bb_amount = bb_player.bet(self.big_blind)
        bb_player.last_action = f"BB {bb_amount}"

        for player, posted, blind in ((sb_player, sb_amount, self.small_blind),
                                      (bb_player, bb_amount, self.big_blind)):
            if posted < blind:
                logger.info(f"{player.name} is all-in for {posted}, short of the {blind} blind")

        self._log_action("BLINDS", {"small_blind": sb_amount, "big_blind": bb_amount})
        logger.debug(f"Blinds posted: SB={sb_amount} BB={bb_amount}")

    def _deal_hole_cards(self) -> None:
        """Deal 2 face-down cards to each player, one at a time starting left of the dealer."""
        order = seats_clockwise_from_dealer(self.num_players, self.dealer_position)
        for _ in range(HOLE_CARDS):
            for seat in order:
                self.players[seat].hand.push(self.deck.deal_one().face_down())

    def _setup_betting_round(self) -> None:
        """Set up the betting round for the current street."""
        if self.state == RoundState.PREFLOP_BETTING:
            # Blinds stay as the street's bets
            for player in self.players:
                player.has_acted = player.state == PlayerState.ALL_IN
            self.current_bet = self.big_blind
            self.last_raise_amount = self.big_blind
            first = get_first_to_act_preflop(self.num_players, self.dealer_position)
        else:
            for player in self.players:
                player.reset_for_new_street()
            self.current_bet = 0
            self.last_raise_amount = 0
            first = get_first_to_act_postflop(self.num_players, self.dealer_position)

        self.current_player_index = self._next_to_act(first)

    def _needs_to_act(self, player: Player) -> bool:
        return player.can_act and (not player.has_acted or player.current_bet < self.current_bet)

    def _next_to_act(self, start: int) -> int:
        """First seat at or clockwise of ``start`` that still owes an action, or -1."""
        for i in range(self.num_players):
            seat = (start + i) % self.num_players
            if self._needs_to_act(self.players[seat]):
                return seat
        return -1

    def _is_betting_round_complete(self) -> bool:
        """Check if the current betting round is complete."""
        can_act = [p for p in self.players if p.can_act]
        if len(can_act) <= 1:
            # A lone player with chips only has to match what the others put in;
            # an excess over a short all-in blind comes back through the side pots
            others = [
                p.current_bet for p in self.players
                if p.is_in_hand and not any(p is q for q in can_act)
            ]
            return all(p.current_bet >= max(others, default=0) for p in can_act)
        return not any(self._needs_to_act(p) for p in can_act)

    def _progress(self) -> None:
        """Advance the state machine until a player owes an action or the round ends."""
        while self.state in BETTING_STATES:
            if self.num_in_hand <= 1:
                self._end_round_early()
                return
            if not self._is_betting_round_complete():
                return
            self._end_betting_round()

    def _end_betting_round(self) -> None:
        """End the current street and move to the next one or to showdown."""
        self._collect_bets_to_pot()

        if self.state == RoundState.RIVER_BETTING:
            self._go_to_showdown()
            return

        if sum(1 for p in self.players if p.can_act) <= 1:
            # Nobody left to bet against: run out the board
            self._deal_remaining_cards()
            self._go_to_showdown()
            return

        dealing_state, betting_state = NEXT_STREET[self.state]
        self._deal_street(dealing_state)
        self._transition(betting_state)
        self._setup_betting_round()

    def _deal_street(self, dealing_state: RoundState) -> None:
        """Burn one card and reveal the flop, turn or river."""
        self._transition(dealing_state)
        self.deck.burn()
        cards = self.deck.deal(STREET_CARDS[dealing_state])
        self.community_cards.extend(cards)
        self._log_action(dealing_state.name, {"cards": [str(c) for c in cards]})
        logger.debug(f"{dealing_state.name}: {self.community_cards.to_string()}")

    def _deal_remaining_cards(self) -> None:
        """Deal remaining community cards when going directly to showdown."""
        for dealing_state in (RoundState.FLOP, RoundState.TURN, RoundState.RIVER):
            if self.state.value < dealing_state.value:
                self._deal_street(dealing_state)

    def _collect_bets_to_pot(self) -> None:
        """Collect all street bets into the main pot."""
        for player in self.players:
            if player.current_bet > 0:
                self.pots[0].add(player.current_bet)
                player.current_bet = 0

    def _end_round_early(self) -> None:
        """End the round when only one player remains; no more cards are dealt."""
        self._collect_bets_to_pot()

        seat = next(i for i, p in enumerate(self.players) if p.is_in_hand)
        winner = self.players[seat]
        amount = self.pot_total
        winner.chips += amount
        self._pot_awarded = amount
        self.winners = [Winner(seat=seat, name=winner.name, amount=amount)]
        self._empty_pots()

        self._log_action("WIN_BY_FOLD", {"winner": winner.name, "amount": amount})
        logger.info(f"{winner.name} wins {amount} chips, all other players folded")

        self.current_player_index = -1
        self._transition(RoundState.POT_DISTRIBUTED)

    def _go_to_showdown(self) -> None:
        """Go to showdown, determine winner(s) and pay them."""
        self._collect_bets_to_pot()
        self._transition(RoundState.SHOWDOWN)
        self.showdown = True
        self.current_player_index = -1

        for player in self.players:
            if player.is_in_hand:
                player.hand = Hand(c.face_up_copy() for c in player.hand)

        self.pots = self._calculate_side_pots()
        self._pot_awarded = sum(pot.amount for pot in self.pots)
        self.winners = self._determine_winners()
        self._distribute_pots()

        self._log_action("SHOWDOWN", {"winners": [w.to_dict() for w in self.winners]})
        for w in self.winners:
            logger.info(f"{w.name} wins {w.amount} chips with {w.description}")

        self._transition(RoundState.POT_DISTRIBUTED)

    def _calculate_side_pots(self) -> List[Pot]:
        """Split the committed chips into a main pot and side pots by all-in level."""
        levels = sorted({p.total_bet for p in self.players if p.total_bet > 0})
        pots: List[Pot] = []
        prev_level = 0
        carry = 0

        for level in levels:
            amount = carry + sum(
                min(p.total_bet, level) - min(p.total_bet, prev_level)
                for p in self.players
            )
            eligible = [
                i for i, p in enumerate(self.players)
                if p.is_in_hand and p.total_bet >= level
            ]
            if eligible:
                pots.append(Pot(amount=amount, eligible_seats=eligible))
                carry = 0
            else:
                # Only folded players reached this level
                carry = amount
            prev_level = level

        if carry:
            pots[-1].add(carry)

        return pots

    def _determine_winners(self) -> List[Winner]:
        """
        Determine winners for each pot.

        Ties split the pot evenly; odd chips go to the tied winners in seat
        order starting left of the dealer.
        """
        ranks: Dict[int, HandRank] = {
            i: rank_hand(p.hand.cards + self.community_cards.cards)
            for i, p in enumerate(self.players)
            if p.is_in_hand
        }
        seat_order = seats_clockwise_from_dealer(self.num_players, self.dealer_position)
        awards: Dict[int, int] = {}

        for pot in self.pots:
            best = max(ranks[seat] for seat in pot.eligible_seats)
            pot_winners = [
                seat for seat in seat_order
                if seat in pot.eligible_seats and ranks[seat] == best
            ]
            for seat, amount in split_pot(pot.amount, pot_winners).items():
                awards[seat] = awards.get(seat, 0) + amount

        return [
            Winner(seat=seat, name=self.players[seat].name, amount=awards[seat], hand_rank=ranks[seat])
            for seat in seat_order
            if seat in awards
        ]

    def _distribute_pots(self) -> None:
        """Pay the winners and reset the pot to zero."""
        for winner in self.winners:
            self.players[winner.seat].chips += winner.amount
        self._empty_pots()

    def _empty_pots(self) -> None:
        self.pots = [Pot()]

    def take_action(
        self,
        action_type: Union[ActionType, str],
        amount: int = 0,
        seat: Optional[int] = None,
    ) -> ActionResult:
        """
        Process a player action.

        Args:
            action_type: Type of action (FOLD, CHECK, CALL, BET, RAISE, ALL_IN)
            amount: Amount for BET/RAISE actions (total for the street, not increment)
            seat: Seat claiming to act; must be the current player when given

        Returns:
            ActionResult indicating success/failure and details. A failed
            action changes nothing.
        """
        if self.state not in BETTING_STATES:
            return ActionResult(False, "No betting round in progress",
                                error=RuleViolation.NO_ROUND_IN_PROGRESS)

        if isinstance(action_type, str):
            try:
                action_type = ActionType(action_type.strip().upper())
            except ValueError:
                return ActionResult(False, f"Unknown action: {action_type}",
                                    error=RuleViolation.INVALID_ACTION)

        if seat is not None and seat != self.current_player_index:
            return ActionResult(
                False,
                f"Seat {seat} acted out of turn, waiting on seat {self.current_player_index}",
                action_type,
                error=RuleViolation.OUT_OF_TURN,
            )

        acting_seat = self.current_player_index
        player = self.players[acting_seat]
        result = self._execute_action(player, action_type, amount)

        if result.success:
            self._log_action(action_type.value, {"player": player.name, "amount": result.amount})
            logger.debug(f"{player.name}: {result.message}")
            self.current_player_index = self._next_to_act(next_seat(acting_seat, self.num_players))
            self._progress()

        return result

    def _invalid(self, message: str, action_type: ActionType) -> ActionResult:
        return ActionResult(False, message, action_type, error=RuleViolation.INVALID_ACTION)

    def _execute_action(self, player: Player, action_type: ActionType, amount: int) -> ActionResult:
        """Validate and execute the specified action for the player."""
        chips_to_call = max(0, self.current_bet - player.current_bet)
        all_in_total = player.chips + player.current_bet
        # Players who already acted only get raise rights back after a full raise
        may_raise = not player.has_acted

        if action_type == ActionType.FOLD:
            player.fold()
            return ActionResult(True, "Folded", ActionType.FOLD, 0)

        if action_type == ActionType.CHECK:
            if chips_to_call > 0:
                return self._invalid(f"Cannot check, must call {chips_to_call}", action_type)
            player.check()
            return ActionResult(True, "Checked", ActionType.CHECK, 0)

        if action_type == ActionType.CALL:
            if chips_to_call <= 0:
                return self._invalid("Nothing to call, use CHECK", action_type)
            actual = player.call(chips_to_call)
            return ActionResult(True, f"Called {actual}", ActionType.CALL, actual)

        if action_type == ActionType.BET:
            if self.current_bet > 0:
                return self._invalid("Cannot bet when there's already a bet, use RAISE", action_type)
            if amount > all_in_total:
                return self._invalid(f"Cannot bet more than stack ({player.chips})", action_type)
            if amount < self.big_blind and amount != all_in_total:
                return self._invalid(f"Minimum bet is {self.big_blind}", action_type)
            actual = self._raise_to(player, amount)
            return ActionResult(True, f"Bet {amount}", ActionType.BET, actual)

        if action_type == ActionType.RAISE:
            if self.current_bet == 0:
                return self._invalid("No bet to raise, use BET", action_type)
            if not may_raise:
                return self._invalid("Action was not reopened, only CALL or FOLD allowed", action_type)

            amount = min(amount, all_in_total)  # Raising more than the stack is all-in
            if amount <= self.current_bet:
                return self._invalid(f"Raise must exceed the current bet of {self.current_bet}", action_type)
            min_raise_total = calculate_min_raise(
                self.current_bet, self.last_raise_amount, self.big_blind
            )
            if amount < min_raise_total and amount != all_in_total:
                return self._invalid(
                    f"Minimum raise is to {min_raise_total} (current: {self.current_bet})",
                    action_type,
                )
            actual = self._raise_to(player, amount)
            return ActionResult(True, f"Raised to {player.current_bet}", ActionType.RAISE, actual)

        if action_type == ActionType.ALL_IN:
            if player.chips == 0:
                return self._invalid("Already all-in", action_type)
            if all_in_total > self.current_bet and not may_raise and self.current_bet > 0:
                return self._invalid("Action was not reopened, only CALL or FOLD allowed", action_type)
            if all_in_total > self.current_bet:
                actual = self._raise_to(player, all_in_total)
            else:
                actual = player.go_all_in()
            return ActionResult(True, f"All-in for {all_in_total}", ActionType.ALL_IN, actual)

        return self._invalid(f"Unknown action: {action_type}", action_type)

    def _raise_to(self, player: Player, total: int) -> int:
        """Put the player in for ``total`` this street; a full raise reopens the action."""
        reopened = is_action_reopened(total, self.current_bet, self.last_raise_amount, self.big_blind)
        if reopened:
            self.last_raise_amount = total - self.current_bet

        actual = player.raise_to(total)
        self.current_bet = max(self.current_bet, player.current_bet)

        if reopened:
            for other in self.players:
                if other is not player and other.is_active:
                    other.has_acted = False
        return actual

    def get_legal_actions(self, player: Optional[Player] = None) -> List[Dict[str, Any]]:
        """
        Get legal actions for the specified player (or current player).

        Returns:
            List of action dicts with type and constraints
        """
        if player is None:
            player = self.current_player

        if player is None or not player.can_act or self.state not in BETTING_STATES:
            return []

        actions = [{"type": ActionType.FOLD.value}]
        chips_to_call = max(0, self.current_bet - player.current_bet)
        all_in_total = player.chips + player.current_bet
        may_raise = not player.has_acted or self.current_bet == 0

        if chips_to_call == 0:
            actions.append({"type": ActionType.CHECK.value})
        else:
            actions.append({
                "type": ActionType.CALL.value,
                "amount": min(chips_to_call, player.chips),
            })

        if player.chips > chips_to_call and may_raise:
            if self.current_bet == 0:
                actions.append({
                    "type": ActionType.BET.value,
                    "min": min(self.big_blind, all_in_total),
                    "max": all_in_total,
                })
            else:
                min_raise_total = calculate_min_raise(
                    self.current_bet, self.last_raise_amount, self.big_blind
                )
                actions.append({
                    "type": ActionType.RAISE.value,
                    "min": min(min_raise_total, all_in_total),
                    "max": all_in_total,
                })

        if player.chips > 0 and (may_raise or player.chips <= chips_to_call):
            actions.append({
                "type": ActionType.ALL_IN.value,
                "amount": all_in_total,
            })

        return actions

    def get_state(self, for_seat: Optional[int] = None) -> Dict[str, Any]:
        """
        Get the current round state.

        Args:
            for_seat: If specified, include private info for this seat

        Returns:
            Round state dictionary
        """
        current = self.current_player
        public_info = {
            "state": self.state.name,
            "pot": self.pot_total,
            "current_bet": self.current_bet,
            "board": [c.to_dict() for c in self.community_cards],
            "dealer_position": self.dealer_position,
            "small_blind_position": self.small_blind_position,
            "big_blind_position": self.big_blind_position,
            "small_blind": self.small_blind,
            "big_blind": self.big_blind,
            "current_player": self.current_player_index if current else None,
            "players": [p.to_dict(hide_cards=not self.showdown) for p in self.players],
            "last_raise": self.last_raise_amount,
        }

        private_info = {}
        if for_seat is not None and 0 <= for_seat < self.num_players:
            player = self.players[for_seat]
            private_info = {
                "seat": for_seat,
                "name": player.name,
                "hand": [c.face_up_copy().to_dict() for c in player.hand],
                "chips": player.chips,
                "available_moves": [a["type"] for a in self.get_legal_actions(player)],
                "chips_to_call": max(0, self.current_bet - player.current_bet),
                "min_raise": calculate_min_raise(
                    self.current_bet, self.last_raise_amount, self.big_blind
                ),
                "current_bet": player.current_bet,
            }

        return {
            "public_info": public_info,
            "private_info": private_info,
        }

    def _log_action(self, action: str, details: Dict[str, Any]) -> None:
        """Log an action to hand history."""
        self.hand_history.append({
            "action": action,
            "state": self.state.name,
            **details
        })

    def get_winners(self) -> List[Winner]:
        """Get winner information after the round is complete."""
        if not self.is_finished():
            return []
        return list(self.winners)

    def result(self) -> RoundResult:
        if not self.is_finished():
            return RoundResult(False, "Round is not finished",
                               error=RuleViolation.NO_ROUND_IN_PROGRESS)
        names = ", ".join(w.name for w in self.winners)
        return RoundResult(
            success=True,
            message=f"Pot of {self._pot_awarded} won by {names}",
            winners=list(self.winners),
            showdown=self.showdown,
            pot=self._pot_awarded,
            community_cards=self.community_cards.cards,
        )
