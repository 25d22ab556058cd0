import unittest

import numpy as np

from pentago.game.rules import PentagoEnv


class TestPentagoEnv(unittest.TestCase):
    def setUp(self):
        self.env = PentagoEnv()
        self.observation, self.info = self.env.reset(seed=0)

    def tearDown(self):
        self.env.close()

    def test_reset_gives_empty_board(self):
        self.assertEqual(self.observation.shape, (6, 6))
        self.assertEqual(self.observation.dtype, np.int8)
        self.assertFalse(self.observation.any())
        self.assertTrue(self.env.observation_space.contains(self.observation))
        self.assertEqual(self.env.action_space.n, 36 + 8)
        self.assertEqual(self.info['num_valid_actions'], 36)
        self.assertEqual(self.info['phase'], 'place')
        self.assertEqual(self.info['current_player'], 1)

    def test_action_encoding(self):
        self.assertEqual(self.env.encode_placement(4, 1), 10)
        self.assertEqual(self.env.encode_rotation(0, 0, False), 36)
        self.assertEqual(self.env.encode_rotation(1, 1, True), 43)

    def test_placement_then_rotation(self):
        observation, reward, terminated, truncated, info = self.env.step(self.env.encode_placement(4, 1))
        self.assertEqual(observation[1, 4], 1)
        self.assertEqual(reward, self.env.reward_step)
        self.assertFalse(terminated)
        self.assertFalse(truncated)
        self.assertEqual(info['phase'], 'rotate')
        self.assertEqual(info['valid_actions'], list(range(36, 44)))

        # Sub-board (1, 0) clockwise: local (1, 1) is the centre and stays put
        observation, reward, terminated, truncated, info = self.env.step(self.env.encode_rotation(1, 0, True))
        self.assertEqual(observation[1, 4], 1)
        self.assertEqual(info['current_player'], 2)
        self.assertEqual(info['phase'], 'place')

    def test_illegal_action_truncates(self):
        self.env.step(0)
        observation, reward, terminated, truncated, info = self.env.step(1)
        self.assertEqual(reward, self.env.reward_invalid_move)
        self.assertFalse(terminated)
        self.assertTrue(truncated)
        self.assertEqual(info['illegal_action'], 'WRONG_PHASE')
        self.assertEqual(observation[0, 1], 0)

    def test_out_of_range_action(self):
        _, reward, _, truncated, info = self.env.step(99)
        self.assertTrue(truncated)
        self.assertEqual(info['illegal_action'], 'OUT_OF_BOUNDS')

    def test_winning_move_rewards_acting_player(self):
        rotate_empty = self.env.encode_rotation(0, 1, True)
        player_two_cells = [(3, 3), (4, 3), (5, 3), (3, 4)]
        for x in range(4):
            self.env.step(self.env.encode_placement(x, 0))
            self.env.step(rotate_empty)
            self.env.step(self.env.encode_placement(*player_two_cells[x]))
            self.env.step(rotate_empty)

        _, reward, terminated, truncated, info = self.env.step(self.env.encode_placement(4, 0))
        self.assertEqual(reward, self.env.reward_win)
        self.assertTrue(terminated)
        self.assertFalse(truncated)
        self.assertEqual(info['winner'], 1)
        self.assertEqual(info['valid_actions'], [])

    def test_ascii_render(self):
        env = PentagoEnv(render_mode="ascii")
        env.reset()
        self.assertIn("+", env.render())
        self.assertIsNone(self.env.render())


if __name__ == '__main__':
    unittest.main(verbosity=2)
